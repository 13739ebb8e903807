"""Mint an admin JWT for local testing.

Usage:
  cd backend
  python scripts/generate_admin_token.py [--email admin@example.com] [--hours 24]
"""

import argparse
import sys
from pathlib import Path

# Allow `python scripts/generate_admin_token.py` without setting PYTHONPATH
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from techprep.core.auth import ADMIN_ROLE, generate_jwt  # noqa: E402
from techprep.core.config import get_settings  # noqa: E402

DEFAULT_USER_ID = "admin-user-id"
DEFAULT_EMAIL = "admin@techinterview.platform"
DEV_SECRET = "your-super-secret-jwt-key-for-development-only"


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate an admin bearer token")
    parser.add_argument("--user-id", default=DEFAULT_USER_ID)
    parser.add_argument("--email", default=DEFAULT_EMAIL)
    parser.add_argument("--hours", type=int, default=None, help="token lifetime (default JWT_EXPIRE_HOURS)")
    args = parser.parse_args()

    settings = get_settings()
    if settings.JWT_SECRET == DEV_SECRET:
        print("WARNING: using the default development JWT_SECRET", file=sys.stderr)

    token = generate_jwt({"userId": args.user_id, "email": args.email, "role": ADMIN_ROLE}, args.hours)
    hours = args.hours or settings.JWT_EXPIRE_HOURS

    print(token)
    print()
    print(f"Authorization: Bearer {token}")
    print()
    print(f'curl -H "Authorization: Bearer {token}" http://localhost:{settings.PORT}/api/v1/admin/content')
    print(f"Token expires in {hours} hours")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Authentication utilities.

Admin endpoints are guarded by a bearer JWT signed with ``JWT_SECRET``.
There is no login flow: tokens are minted out of band (see
``scripts/generate_admin_token.py``) and only decoded here.
"""

from datetime import UTC, datetime, timedelta
from typing import Annotated, Any

from fastapi import Depends, Request
from jose import ExpiredSignatureError, JWTError, jwt

from techprep.core.config import get_settings
from techprep.core.errors import AuthenticationError, AuthorizationError
from techprep.core.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

ADMIN_ROLE = "admin"


def generate_jwt(payload: dict[str, Any], expires_hours: int | None = None) -> str:
    """Sign ``payload`` with issuer, audience and expiry claims."""
    now = datetime.now(UTC)
    claims = dict(payload)
    claims.update(
        {
            "iat": now,
            "exp": now + timedelta(hours=expires_hours or settings.JWT_EXPIRE_HOURS),
            "iss": settings.JWT_ISSUER,
            "aud": settings.JWT_AUDIENCE,
        }
    )
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_jwt(token: str) -> dict[str, Any]:
    """Verify signature, expiry, issuer and audience.

    Raises:
        AuthenticationError: ``TOKEN_EXPIRED`` or ``INVALID_TOKEN``.
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except ExpiredSignatureError as e:
        raise AuthenticationError("Token has expired", code="TOKEN_EXPIRED") from e
    except JWTError as e:
        raise AuthenticationError("Invalid token", code="INVALID_TOKEN") from e


def get_token_payload(request: Request) -> dict[str, Any]:
    header = request.headers.get("Authorization")
    if not header:
        raise AuthenticationError("Authorization header is required", code="MISSING_AUTH_HEADER")

    scheme, _, token = header.partition(" ")
    if scheme != "Bearer" or not token.strip():
        raise AuthenticationError(
            "Authorization header must be in format: Bearer <token>",
            code="INVALID_AUTH_FORMAT",
        )

    payload = decode_jwt(token.strip())
    request.state.user = payload
    return payload


def require_admin(payload: Annotated[dict[str, Any], Depends(get_token_payload)]) -> dict[str, Any]:
    if payload.get("role") != ADMIN_ROLE:
        logger.warning("Admin access denied", user_id=payload.get("userId"), role=payload.get("role"))
        raise AuthorizationError("Admin privileges required", code="INSUFFICIENT_PRIVILEGES")
    return payload


# Type alias for FastAPI dependency
AdminUserDep = Annotated[dict[str, Any], Depends(require_admin)]

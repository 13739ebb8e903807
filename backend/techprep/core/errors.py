"""Application error types.

Every error raised on purpose by a service or dependency is an ``AppError``.
The exception handlers in ``techprep.api.error_handlers`` turn them into the
standard error envelope, so services never build HTTP responses themselves.
"""

from typing import Any

_DEFAULT_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    408: "REQUEST_TIMEOUT",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
    429: "RATE_LIMIT_EXCEEDED",
    500: "INTERNAL_SERVER_ERROR",
    502: "BAD_GATEWAY",
    503: "SERVICE_UNAVAILABLE",
}


def default_code(status_code: int) -> str:
    return _DEFAULT_CODES.get(status_code, "UNKNOWN_ERROR")


class AppError(Exception):
    """Error with an HTTP status and a machine-readable code."""

    status_code = 500

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.code = code or default_code(self.status_code)
        self.details = details


class BadRequestError(AppError):
    status_code = 400


class AuthenticationError(AppError):
    status_code = 401


class AuthorizationError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class SessionTimeoutError(AppError):
    status_code = 408


class ConflictError(AppError):
    status_code = 409


class RateLimitError(AppError):
    status_code = 429

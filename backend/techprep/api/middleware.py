"""HTTP middleware: security headers, request logging and rate limiting."""

import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from techprep.api.error_handlers import unhandled_error_handler
from techprep.core.cache import CacheKeys, CacheService, cache_service
from techprep.core.config import get_settings
from techprep.core.logging import bind_request_context, clear_request_context, get_logger
from techprep.schemas.common import iso_now

logger = get_logger(__name__)
settings = get_settings()

REQUEST_ID_HEADER = "X-Request-ID"
SLOW_REQUEST_MS = 1000

CallNext = Callable[[Request], Awaitable[Response]]


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else "unknown"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    HEADERS = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "X-XSS-Protection": "0",
        "Referrer-Policy": "strict-origin-when-cross-origin",
        "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
        "Content-Security-Policy": "default-src 'self'; frame-ancestors 'none'",
    }

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        response = await call_next(request)
        for name, value in self.HEADERS.items():
            response.headers.setdefault(name, value)
        if settings.is_production:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log it with its duration."""

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        bind_request_context(request_id=request_id)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            # Unhandled errors still get the request id, timing and log line
            response = await unhandled_error_handler(request, exc)
        finally:
            clear_request_context("request_id")
        duration_ms = round((time.perf_counter() - start) * 1000, 2)

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms}ms"

        log = logger.bind(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=duration_ms,
            client_ip=client_ip(request),
        )
        if response.status_code >= 400:
            log.warning("Request failed")
        elif duration_ms > SLOW_REQUEST_MS:
            log.warning("Slow request")
        else:
            log.info("Request completed")
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Fixed-window limiter keyed by client address, counted in the cache store.

    Requests are let through when the store is unreachable.
    """

    def __init__(
        self,
        app: ASGIApp,
        max_requests: int | None = None,
        window_seconds: int | None = None,
        path_prefix: str = "/api/",
        cache: CacheService | None = None,
    ) -> None:
        super().__init__(app)
        self.max_requests = max_requests or settings.RATE_LIMIT_MAX_REQUESTS
        self.window_seconds = window_seconds or settings.RATE_LIMIT_WINDOW_SECONDS
        self.path_prefix = path_prefix
        self.cache = cache or cache_service

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        if not request.url.path.startswith(self.path_prefix) or request.method == "OPTIONS":
            return await call_next(request)

        now = int(time.time())
        window = now // self.window_seconds
        reset_at = (window + 1) * self.window_seconds
        client = client_ip(request)

        count = await self.cache.incr(CacheKeys.rate_limit(client, window), ttl=self.window_seconds)
        if count is None:
            return await call_next(request)

        headers = {
            "X-RateLimit-Limit": str(self.max_requests),
            "X-RateLimit-Remaining": str(max(0, self.max_requests - count)),
            "X-RateLimit-Reset": str(reset_at),
        }
        if count > self.max_requests:
            retry_after = max(1, reset_at - now)
            logger.warning("Rate limit exceeded", client_ip=client, path=request.url.path, count=count)
            return JSONResponse(
                {
                    "success": False,
                    "error": {
                        "code": "RATE_LIMIT_EXCEEDED",
                        "message": "Too many requests, please try again later",
                        "retryAfter": retry_after,
                        "timestamp": iso_now(),
                        "requestId": getattr(request.state, "request_id", None),
                    },
                },
                status_code=429,
                headers={**headers, "Retry-After": str(retry_after)},
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response

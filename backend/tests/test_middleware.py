"""Tests for rate limiting and the error envelope, on a minimal app."""

import pytest
from fakeredis import FakeAsyncRedis, FakeServer
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from techprep.api.error_handlers import register_exception_handlers
from techprep.api.middleware import RateLimitMiddleware, RequestLoggingMiddleware, client_ip
from techprep.core.cache import CacheService
from techprep.core.errors import ConflictError, NotFoundError


def build_app(cache: CacheService, max_requests: int = 2) -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    app.add_middleware(RateLimitMiddleware, max_requests=max_requests, window_seconds=60, cache=cache)
    app.add_middleware(RequestLoggingMiddleware)

    @app.get("/api/ping")
    async def ping() -> dict:
        return {"pong": True}

    @app.get("/health")
    async def health() -> dict:
        return {"ok": True}

    @app.get("/api/missing")
    async def missing() -> dict:
        raise NotFoundError("Thing not found", code="THING_NOT_FOUND", details={"id": "42"})

    @app.get("/api/conflict")
    async def conflict() -> dict:
        raise ConflictError("Already exists")

    @app.get("/api/boom")
    async def boom() -> dict:
        raise RuntimeError("kaboom")

    return app


def make_client(app: FastAPI) -> AsyncClient:
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest.fixture
def cache(fake_redis: FakeAsyncRedis) -> CacheService:
    return CacheService(client=fake_redis, strict=False)


# ============================================================================
# Rate limiting
# ============================================================================


@pytest.mark.asyncio
async def test_rate_limit_blocks_after_max_requests(cache: CacheService) -> None:
    async with make_client(build_app(cache)) as client:
        first = await client.get("/api/ping")
        second = await client.get("/api/ping")
        third = await client.get("/api/ping")

    assert first.headers["X-RateLimit-Remaining"] == "1"
    assert second.headers["X-RateLimit-Remaining"] == "0"
    assert third.status_code == 429
    assert third.headers["X-RateLimit-Remaining"] == "0"
    assert 1 <= int(third.headers["Retry-After"]) <= 60

    error = third.json()["error"]
    assert error["code"] == "RATE_LIMIT_EXCEEDED"
    assert error["retryAfter"] == int(third.headers["Retry-After"])
    assert error["requestId"] == third.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_rate_limit_is_per_client(cache: CacheService) -> None:
    async with make_client(build_app(cache, max_requests=1)) as client:
        assert (await client.get("/api/ping", headers={"X-Forwarded-For": "10.0.0.1"})).status_code == 200
        assert (await client.get("/api/ping", headers={"X-Forwarded-For": "10.0.0.1"})).status_code == 429
        assert (await client.get("/api/ping", headers={"X-Forwarded-For": "10.0.0.2, 10.0.0.1"})).status_code == 200


@pytest.mark.asyncio
async def test_rate_limit_skips_paths_outside_api(cache: CacheService) -> None:
    async with make_client(build_app(cache, max_requests=1)) as client:
        for _ in range(3):
            response = await client.get("/health")
            assert response.status_code == 200
            assert "X-RateLimit-Limit" not in response.headers


@pytest.mark.asyncio
async def test_rate_limit_lets_requests_through_when_store_is_down() -> None:
    server = FakeServer()
    server.connected = False
    cache = CacheService(client=FakeAsyncRedis(server=server, decode_responses=True), strict=False)

    async with make_client(build_app(cache, max_requests=1)) as client:
        for _ in range(3):
            assert (await client.get("/api/ping")).status_code == 200


class _Request:
    def __init__(self, headers: dict[str, str], host: str = "127.0.0.1"):
        self.headers = headers
        self.client = type("Address", (), {"host": host})()


def test_client_ip_precedence():
    assert client_ip(_Request({"X-Forwarded-For": "1.1.1.1, 2.2.2.2", "X-Real-IP": "3.3.3.3"})) == "1.1.1.1"
    assert client_ip(_Request({"X-Real-IP": "3.3.3.3"})) == "3.3.3.3"
    assert client_ip(_Request({})) == "127.0.0.1"


# ============================================================================
# Error envelope
# ============================================================================


@pytest.mark.asyncio
async def test_app_error_envelope(cache: CacheService) -> None:
    async with make_client(build_app(cache, max_requests=100)) as client:
        missing = await client.get("/api/missing")
        conflict = await client.get("/api/conflict")

    assert missing.status_code == 404
    error = missing.json()["error"]
    assert missing.json()["success"] is False
    assert error["code"] == "THING_NOT_FOUND"
    assert error["message"] == "Thing not found"
    assert error["details"] == {"id": "42"}
    assert error["timestamp"].endswith("Z")

    assert conflict.status_code == 409
    assert conflict.json()["error"]["code"] == "CONFLICT"
    assert "details" not in conflict.json()["error"]


@pytest.mark.asyncio
async def test_unhandled_error_is_a_500_envelope(cache: CacheService) -> None:
    async with make_client(build_app(cache, max_requests=100)) as client:
        response = await client.get("/api/boom", headers={"X-Request-ID": "req-500"})

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "INTERNAL_SERVER_ERROR"
    # Outside production the message is passed through
    assert error["message"] == "kaboom"
    assert error["requestId"] == "req-500"
    assert response.headers["X-Request-ID"] == "req-500"
    assert response.headers["X-Response-Time"].endswith("ms")

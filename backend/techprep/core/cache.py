"""Redis-backed cache service.

A thin wrapper over ``redis.asyncio`` that stores JSON values with a TTL.
Reads degrade to a cache miss when Redis is unreachable; writes are logged
and dropped unless ``REDIS_REQUIRED`` is set.
"""

import hashlib
import json
from datetime import UTC, datetime
from typing import Any

import redis.asyncio as redis

from techprep.core.config import get_settings
from techprep.core.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()


class CacheService:
    def __init__(
        self,
        client: redis.Redis | None = None,
        default_ttl: int | None = None,
        strict: bool | None = None,
    ) -> None:
        self._client = client
        self.default_ttl = default_ttl or settings.CACHE_DEFAULT_TTL
        self.strict = settings.REDIS_REQUIRED if strict is None else strict

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=settings.REDIS_CONNECT_TIMEOUT,
            )
        return self._client

    def use_client(self, client: redis.Redis | None) -> None:
        """Swap the underlying client (None rebuilds from settings on next use)."""
        self._client = client

    async def connect(self) -> bool:
        """Open the connection and ping it.

        Returns False when Redis is unreachable and the cache runs degraded.
        In strict mode the failure is raised instead.
        """
        try:
            await self.client.ping()
        except Exception as e:
            if self.strict:
                logger.error("Redis connection failed", url=settings.REDIS_URL, error=str(e))
                raise
            logger.warning("Redis unavailable, running without cache", error=str(e))
            return False
        logger.info("Redis connected", url=settings.REDIS_URL)
        return True

    async def disconnect(self) -> None:
        if self._client is None:
            return
        try:
            await self._client.aclose()
        except Exception as e:
            logger.warning("Failed to disconnect from Redis", error=str(e))

    async def get(self, key: str) -> Any | None:
        try:
            value = await self.client.get(key)
        except Exception as e:
            logger.warning("Cache get failed", key=key, error=str(e))
            return None
        if value is None:
            return None
        try:
            return json.loads(value)
        except (json.JSONDecodeError, TypeError):
            logger.warning("Discarding undecodable cache entry", key=key)
            return None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        try:
            payload = json.dumps(value, default=str)
            await self.client.setex(key, ttl or self.default_ttl, payload)
            return True
        except Exception as e:
            logger.warning("Cache set failed", key=key, error=str(e))
            if self.strict:
                raise
            return False

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        try:
            return int(await self.client.delete(*keys))
        except Exception as e:
            logger.warning("Cache delete failed", keys=list(keys), error=str(e))
            return 0

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern."""
        try:
            keys = [key async for key in self.client.scan_iter(match=pattern, count=500)]
            if not keys:
                return 0
            return int(await self.client.delete(*keys))
        except Exception as e:
            logger.warning("Cache pattern delete failed", pattern=pattern, error=str(e))
            return 0

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self.client.exists(key))
        except Exception as e:
            logger.warning("Cache exists failed", key=key, error=str(e))
            return False

    async def expire(self, key: str, ttl: int) -> bool:
        try:
            return bool(await self.client.expire(key, ttl))
        except Exception as e:
            logger.warning("Cache expire failed", key=key, error=str(e))
            return False

    async def ttl(self, key: str) -> int:
        try:
            return int(await self.client.ttl(key))
        except Exception as e:
            logger.warning("Cache ttl failed", key=key, error=str(e))
            return -1

    async def incr(self, key: str, ttl: int | None = None) -> int | None:
        """Increment a counter, refreshing its expiry when ``ttl`` is given.

        Returns None if the store is unreachable.
        """
        try:
            pipe = self.client.pipeline()
            pipe.incr(key)
            if ttl:
                pipe.expire(key, ttl)
            results = await pipe.execute()
            return int(results[0])
        except Exception as e:
            logger.warning("Cache incr failed", key=key, error=str(e))
            return None

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except Exception as e:
            logger.warning("Redis ping failed", error=str(e))
            return False


def _canonical_filters(filters: dict[str, Any]) -> str:
    normalized: dict[str, Any] = {}
    for name, value in filters.items():
        if value is None or value == [] or value == "":
            continue
        if isinstance(value, list | tuple | set):
            value = sorted(str(v) for v in value)
        normalized[name] = value
    return json.dumps(normalized, sort_keys=True, separators=(",", ":"), default=str)


class CacheKeys:
    """Key builders, so every module names entries the same way."""

    @staticmethod
    def all_roles() -> str:
        return "roles:all"

    @staticmethod
    def roadmap_by_role(role: str, level: str) -> str:
        return f"roadmaps:{role}:{level}"

    @staticmethod
    def roadmap_by_id(roadmap_id: str) -> str:
        return f"roadmap:{roadmap_id}"

    @staticmethod
    def question_by_id(question_id: str) -> str:
        return f"question:{question_id}"

    @staticmethod
    def questions_by_filter(filters: dict[str, Any]) -> str:
        digest = hashlib.md5(_canonical_filters(filters).encode("utf-8")).hexdigest()
        return f"questions:filter:{digest}"

    @staticmethod
    def question_filter_options() -> str:
        return "questions:filter-options"

    @staticmethod
    def mock_interview_details(interview_id: str) -> str:
        return f"mock-interview:{interview_id}:details"

    @staticmethod
    def admin_content_overview() -> str:
        return "admin:content-overview"

    @staticmethod
    def admin_analytics() -> str:
        return "admin:analytics"

    @staticmethod
    def rate_limit(client: str, window: int) -> str:
        return f"rate-limit:{client}:{window}"

    @staticmethod
    def question_views(day: datetime | None = None) -> str:
        day = day or datetime.now(UTC)
        return f"stats:question-views:{day:%Y%m%d}"


# Global cache instance
cache_service = CacheService()

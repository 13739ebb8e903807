"""Health check routes (unversioned, outside the rate limiter)."""

import platform
import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from techprep.core.cache import cache_service
from techprep.core.config import get_settings
from techprep.core.database import check_db_connection
from techprep.schemas.common import iso_now

settings = get_settings()
router = APIRouter(prefix="/health", tags=["health"])

_STARTED_AT = time.monotonic()


def uptime() -> float:
    return round(time.monotonic() - _STARTED_AT, 3)


async def _timed(check) -> tuple[bool, str]:
    start = time.perf_counter()
    ok = await check()
    return ok, f"{round((time.perf_counter() - start) * 1000)}ms"


@router.get("")
async def health_check() -> dict:
    return {
        "success": True,
        "message": f"{settings.APP_NAME} is running",
        "timestamp": iso_now(),
        "uptime": uptime(),
        "environment": settings.ENV,
    }


@router.get("/detailed")
async def detailed_health_check() -> JSONResponse:
    """Database and cache status with timings; 503 if either is down."""
    start = time.perf_counter()
    db_ok, db_time = await _timed(check_db_connection)
    redis_ok, redis_time = await _timed(cache_service.ping)

    body = {
        "success": True,
        "message": "Detailed health check completed",
        "timestamp": iso_now(),
        "uptime": uptime(),
        "environment": settings.ENV,
        "version": settings.APP_VERSION,
        "services": {
            "database": {"status": "healthy" if db_ok else "unhealthy", "responseTime": db_time},
            "redis": {"status": "healthy" if redis_ok else "unhealthy", "responseTime": redis_time},
        },
        "system": {
            "platform": platform.system().lower(),
            "arch": platform.machine(),
            "pythonVersion": platform.python_version(),
        },
        "responseTime": f"{round((time.perf_counter() - start) * 1000)}ms",
    }
    return JSONResponse(body, status_code=200 if db_ok and redis_ok else 503)


@router.get("/ready")
async def readiness_check() -> JSONResponse:
    db_ok = await check_db_connection()
    redis_ok = await cache_service.ping()
    if db_ok and redis_ok:
        return JSONResponse({"success": True, "message": "Service is ready", "timestamp": iso_now()})
    return JSONResponse(
        {
            "success": False,
            "message": "Service is not ready",
            "timestamp": iso_now(),
            "issues": {
                "database": None if db_ok else "Database connection failed",
                "redis": None if redis_ok else "Redis connection failed",
            },
        },
        status_code=503,
    )


@router.get("/live")
async def liveness_check() -> dict:
    return {"success": True, "message": "Service is alive", "timestamp": iso_now(), "uptime": uptime()}

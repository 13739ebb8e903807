"""API status routes."""

from fastapi import APIRouter

from techprep.core.config import get_settings
from techprep.schemas.common import iso_now, success_response

settings = get_settings()
router = APIRouter(prefix="/status", tags=["status"])


@router.get("")
async def api_status() -> dict:
    return success_response(
        {
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.ENV,
            "timestamp": iso_now(),
            "features": {
                "roadmaps": "available",
                "questions": "available",
                "mockInterviews": "available",
                "admin": "available",
            },
            "endpoints": {
                "health": "/health",
                "api": "/api/v1",
                "documentation": "/docs" if settings.is_development else None,
            },
        }
    )


@router.get("/version")
async def api_version() -> dict:
    return success_response(
        {
            "version": settings.APP_VERSION,
            "apiVersion": "v1",
            "commit": settings.GIT_COMMIT,
            "branch": settings.GIT_BRANCH,
        }
    )


@router.get("/capabilities")
async def api_capabilities() -> dict:
    window_minutes = settings.RATE_LIMIT_WINDOW_SECONDS // 60
    return success_response(
        {
            "features": [
                "role-based-roadmaps",
                "question-bank",
                "mock-interviews",
                "heuristic-feedback",
                "content-management",
            ],
            "integrations": ["redis-cache", "sql-database"],
            "rateLimit": {
                "general": f"{settings.RATE_LIMIT_MAX_REQUESTS} requests per {window_minutes} minutes",
            },
        }
    )

"""FastAPI application entry point."""

import asyncio
import contextlib
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from techprep.api.error_handlers import register_exception_handlers
from techprep.api.middleware import RateLimitMiddleware, RequestLoggingMiddleware, SecurityHeadersMiddleware
from techprep.api.routes import admin, health, mock_interviews, questions, roadmaps, status
from techprep.core.cache import cache_service
from techprep.core.config import get_settings
from techprep.core.database import close_db, init_db
from techprep.core.logging import configure_logging, get_logger
from techprep.services import mock_interview_service

settings = get_settings()
logger = get_logger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    configure_logging(debug=settings.DEBUG, service=settings.APP_NAME, env=settings.ENV)
    logger.info(
        "Starting Tech Interview Platform API",
        version=settings.APP_VERSION,
        env=settings.ENV,
        debug=settings.DEBUG,
    )
    await cache_service.connect()
    await init_db()

    cleanup_task = None
    if settings.MOCK_INTERVIEW_CLEANUP_INTERVAL_SECONDS > 0:
        cleanup_task = asyncio.create_task(
            mock_interview_service.run_cleanup_loop(settings.MOCK_INTERVIEW_CLEANUP_INTERVAL_SECONDS)
        )
    yield
    # Shutdown
    logger.info("Shutting down Tech Interview Platform API")
    if cleanup_task is not None:
        cleanup_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await cleanup_task
    await cache_service.disconnect()
    await close_db()


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Interview questions, learning roadmaps and mock interviews",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

register_exception_handlers(app)

# Middleware, innermost first
app.add_middleware(RateLimitMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    expose_headers=["X-Total-Count", "X-Page-Count", "X-Request-ID"],
)

# Include routers
app.include_router(health.router)
app.include_router(status.router, prefix=API_PREFIX)
app.include_router(questions.router, prefix=API_PREFIX)
app.include_router(roadmaps.router, prefix=API_PREFIX)
app.include_router(mock_interviews.router, prefix=API_PREFIX)
app.include_router(admin.router, prefix=API_PREFIX)


@app.get("/")
async def root() -> dict:
    """Root endpoint."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs" if settings.is_development else None,
        "api": API_PREFIX,
    }

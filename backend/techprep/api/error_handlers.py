"""Exception handlers producing the standard error envelope."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from techprep.core.config import get_settings
from techprep.core.errors import AppError
from techprep.core.logging import get_logger
from techprep.schemas.common import iso_now

logger = get_logger(__name__)
settings = get_settings()


def error_body(request: Request, code: str, message: str, details: Any = None) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    error["timestamp"] = iso_now()
    error["requestId"] = getattr(request.state, "request_id", None)
    return {"success": False, "error": error}


def _validation_details(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    return [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "message": str(err.get("msg", "")),
            "type": str(err.get("type", "")),
        }
        for err in errors
    ]


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.info
    log("Request rejected", code=exc.code, status=exc.status_code, path=request.url.path, message=exc.message)
    return JSONResponse(
        error_body(request, exc.code, exc.message, exc.details),
        status_code=exc.status_code,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = _validation_details(list(exc.errors()))
    logger.info("Validation failed", path=request.url.path, errors=details)
    return JSONResponse(
        error_body(request, "VALIDATION_ERROR", "Request validation failed", details),
        status_code=400,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_EXCEPTION"
    message = exc.detail if isinstance(exc.detail, str) else "HTTP error"
    if exc.status_code == 404:
        message = f"Route {request.method} {request.url.path} not found"
    return JSONResponse(
        error_body(request, code, message),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error", path=request.url.path, error=str(exc.orig))
    return JSONResponse(
        error_body(request, "CONFLICT", "Resource conflicts with existing data"),
        status_code=409,
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error", path=request.url.path, error=str(exc), exc_info=exc)
    message = "Internal server error" if settings.is_production else str(exc) or "Internal server error"
    return JSONResponse(
        error_body(request, "INTERNAL_SERVER_ERROR", message),
        status_code=500,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

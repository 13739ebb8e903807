"""Structured logging.

Every record goes through structlog: JSON lines normally, the console
renderer when ``debug`` is on. Request-scoped fields travel in
``structlog.contextvars`` and are merged into each event.
"""

import logging
import sys
from typing import Any

import structlog

# Covered by the request logging middleware, or too chatty at INFO
_QUIET_LOGGERS = ("uvicorn.access", "aiosqlite", "asyncio")


def _service_fields(service: str, env: str) -> structlog.types.Processor:
    def add_service_fields(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service)
        event_dict.setdefault("env", env)
        return event_dict

    return add_service_fields


def configure_logging(debug: bool = False, service: str = "techprep", env: str = "development") -> None:
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            _service_fields(service, env),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def bind_request_context(**fields: Any) -> None:
    """Attach fields to every event logged while handling the current request."""
    structlog.contextvars.bind_contextvars(**fields)


def clear_request_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)  # type: ignore[no-any-return]

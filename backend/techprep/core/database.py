"""Async engine, session factory and declarative base.

SQLite (the default and the test backend) gets foreign keys switched on
per connection so ``ON DELETE CASCADE`` behaves as it does on Postgres.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from techprep.core.config import get_settings
from techprep.core.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(UTC).replace(tzinfo=None)


def _engine_options(url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": settings.DATABASE_ECHO}
    if make_url(url).get_backend_name() != "sqlite":
        options["pool_pre_ping"] = True
    return options


def _sqlite_pragmas(dbapi_connection, connection_record) -> None:  # noqa: ANN001
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str) -> AsyncEngine:
    async_engine = create_async_engine(url, **_engine_options(url))
    if async_engine.dialect.name == "sqlite":
        event.listen(async_engine.sync_engine, "connect", _sqlite_pragmas)
    return async_engine


engine = build_engine(settings.DATABASE_URL)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


async def init_db() -> None:
    """Create any missing tables. Alembic owns schema changes after that."""
    import techprep.models  # noqa: F401

    async with engine.begin() as conn:
        logger.info("Ensuring database tables exist", backend=engine.dialect.name)
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    logger.info("Disposing database engine")
    await engine.dispose()


async def check_db_connection() -> bool:
    """Run a trivial query; False when the database is unreachable."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Database health check failed", error=str(e))
        return False
    return True


@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    """Session that commits on clean exit and rolls back on error.

    Services commit explicitly where they need to; the final commit here
    only flushes whatever a caller left pending.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

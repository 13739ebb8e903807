"""Shared fixtures.

Environment variables must be set before anything under ``techprep`` is
imported, since settings, the engine and the cache client are built at
import time.
"""

import os
import pathlib
import tempfile
from collections.abc import AsyncGenerator, Callable, Generator
from decimal import Decimal
from typing import Any

TEST_DB_FILE = pathlib.Path(tempfile.mkdtemp(prefix="techprep-tests-")) / "test.sqlite"

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_FILE}"
os.environ["ENV"] = "test"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["RATE_LIMIT_MAX_REQUESTS"] = "100000"
os.environ["MOCK_INTERVIEW_CLEANUP_INTERVAL_SECONDS"] = "0"
os.environ["REDIS_REQUIRED"] = "false"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fakeredis import FakeAsyncRedis, FakeServer  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

import techprep.models  # noqa: E402, F401
from techprep.core.auth import generate_jwt  # noqa: E402
from techprep.core.cache import cache_service  # noqa: E402
from techprep.core.database import AsyncSessionLocal, Base, engine  # noqa: E402
from techprep.main import app  # noqa: E402
from techprep.models import (  # noqa: E402
    Difficulty,
    Level,
    Question,
    QuestionType,
    Roadmap,
    Role,
    Topic,
    TopicQuestion,
)


@pytest.fixture(autouse=True)
def fake_redis() -> Generator[FakeAsyncRedis, None, None]:
    """Route every cache call to an in-memory Redis, fresh per test."""
    client = FakeAsyncRedis(server=FakeServer(), decode_responses=True)
    cache_service.use_client(client)
    yield client
    cache_service.use_client(None)


@pytest_asyncio.fixture
async def reset_db() -> AsyncGenerator[None, None]:
    """Drop and recreate every table so each test starts empty."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    # Pooled aiosqlite connections are bound to this test's event loop
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(reset_db: None) -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


@pytest_asyncio.fixture
async def client(reset_db: None) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def make_token(role: str = "admin", **claims: Any) -> str:
    payload = {"userId": "admin-user-id", "email": "admin@test.dev", "role": role}
    payload.update(claims)
    return generate_jwt(payload)


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def user_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(role='user')}"}


# ============================================================================
# Data builders
# ============================================================================


@pytest_asyncio.fixture
async def make_role(test_session: AsyncSession) -> Callable[..., Any]:
    async def _make(name: str = "Frontend Developer", **fields: Any) -> Role:
        role = Role(name=name, technologies=fields.pop("technologies", ["JavaScript"]), **fields)
        test_session.add(role)
        await test_session.commit()
        return role

    return _make


@pytest_asyncio.fixture
async def make_question(test_session: AsyncSession) -> Callable[..., Any]:
    async def _make(title: str = "Implement debounce", **fields: Any) -> Question:
        values: dict[str, Any] = {
            "content": f"{title} content",
            "type": QuestionType.CODING,
            "difficulty": Difficulty.MEDIUM,
            "technologies": ["JavaScript"],
            "roles": ["Frontend Developer"],
            "companies": [],
            "tags": [],
            "rating": Decimal("4.00"),
            "is_approved": True,
        }
        values.update(fields)
        question = Question(title=title, **values)
        test_session.add(question)
        await test_session.commit()
        return question

    return _make


@pytest_asyncio.fixture
async def make_roadmap(test_session: AsyncSession) -> Callable[..., Any]:
    """Roadmap with one topic per entry in ``topics`` ({title: [questions]})."""

    async def _make(
        role: Role,
        level: Level = Level.JUNIOR,
        topics: dict[str, list[Question]] | None = None,
    ) -> Roadmap:
        roadmap = Roadmap(
            role_id=role.id,
            level=level,
            title=f"{level.value.title()} {role.name} Learning Path",
            estimated_hours=120,
            prerequisites=["HTML"],
        )
        test_session.add(roadmap)
        await test_session.flush()
        for order, (title, questions) in enumerate((topics or {}).items(), start=1):
            topic = Topic(
                roadmap_id=roadmap.id,
                title=title,
                order=order,
                resources=[{"title": "Guide", "url": "https://example.com", "type": "article"}],
            )
            test_session.add(topic)
            await test_session.flush()
            for question in questions:
                test_session.add(TopicQuestion(topic_id=topic.id, question_id=question.id))
        await test_session.commit()
        return roadmap

    return _make

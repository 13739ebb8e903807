"""Tests for the admin API: authentication and content management."""

import uuid
from datetime import UTC, datetime, timedelta

import pytest
from httpx import AsyncClient
from jose import jwt

from techprep.core.auth import generate_jwt
from techprep.core.config import get_settings
from techprep.models import Difficulty, Level

API = "/api/v1"

settings = get_settings()


# ============================================================================
# Authentication
# ============================================================================


def _foreign_audience_token() -> str:
    now = datetime.now(UTC)
    claims = {
        "userId": "u1",
        "role": "admin",
        "iat": now,
        "exp": now + timedelta(hours=1),
        "iss": settings.JWT_ISSUER,
        "aud": "someone-else",
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("headers", "status", "code"),
    [
        ({}, 401, "MISSING_AUTH_HEADER"),
        ({"Authorization": "Token abc"}, 401, "INVALID_AUTH_FORMAT"),
        ({"Authorization": "Bearer "}, 401, "INVALID_AUTH_FORMAT"),
        ({"Authorization": "Bearer not-a-jwt"}, 401, "INVALID_TOKEN"),
    ],
)
async def test_admin_rejects_bad_credentials(client: AsyncClient, headers, status, code) -> None:
    response = await client.get(f"{API}/admin/content", headers=headers)
    assert response.status_code == status
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == code


@pytest.mark.asyncio
async def test_admin_rejects_expired_token(client: AsyncClient) -> None:
    token = generate_jwt({"userId": "u1", "role": "admin"}, expires_hours=-1)
    response = await client.get(f"{API}/admin/content", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "TOKEN_EXPIRED"


@pytest.mark.asyncio
async def test_admin_rejects_foreign_audience(client: AsyncClient) -> None:
    headers = {"Authorization": f"Bearer {_foreign_audience_token()}"}
    response = await client.get(f"{API}/admin/content", headers=headers)
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_admin_requires_admin_role(client: AsyncClient, user_headers) -> None:
    response = await client.get(f"{API}/admin/content", headers=user_headers)
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "INSUFFICIENT_PRIVILEGES"


# ============================================================================
# Dashboard
# ============================================================================


@pytest.mark.asyncio
async def test_content_overview(client: AsyncClient, admin_headers, make_role, make_roadmap, make_question) -> None:
    role = await make_role()
    await make_roadmap(role, Level.JUNIOR)
    await make_question("Approved")
    await make_question("Pending", is_approved=False)

    response = await client.get(f"{API}/admin/content", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["questions"]["total"] == 2
    assert data["questions"]["approved"] == 1
    assert data["questions"]["pending"] == 1
    assert data["questions"]["byDifficulty"] == {"easy": 0, "medium": 2, "hard": 0}
    assert data["roadmaps"]["byLevel"] == {"junior": 1, "mid": 0, "senior": 0}
    assert data["roles"]["total"] == 1
    assert data["mockInterviews"]["total"] == 0


@pytest.mark.asyncio
async def test_platform_analytics(client: AsyncClient, admin_headers, make_role, make_question) -> None:
    await make_role()
    await make_question("A", technologies=["React", "JavaScript"])
    await make_question("B", technologies=["React"])
    question = await make_question("C", technologies=["Go"])
    await client.get(f"{API}/questions/{question.id}")

    response = await client.get(f"{API}/admin/analytics", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["overview"]["totalQuestions"] == 3
    assert data["questions"]["averageRating"] == 4.0
    assert data["questions"]["topTechnologies"][0] == {"technology": "React", "count": 2}
    assert data["mockInterviews"]["completionRate"] == 0
    assert data["usage"]["questionsViewedToday"] == 1


# ============================================================================
# Moderation
# ============================================================================


@pytest.mark.asyncio
async def test_approve_makes_question_searchable(client: AsyncClient, admin_headers, make_question) -> None:
    pending = await make_question("Pending", is_approved=False)

    before = await client.get(f"{API}/questions")
    assert before.json()["data"]["pagination"]["total"] == 0

    response = await client.post(
        f"{API}/admin/approve", json={"type": "question", "id": pending.id}, headers=admin_headers
    )
    assert response.status_code == 200

    # Approval clears the cached search page
    after = await client.get(f"{API}/questions")
    assert [q["id"] for q in after.json()["data"]["questions"]] == [pending.id]


@pytest.mark.asyncio
async def test_approve_unknown_question(client: AsyncClient, admin_headers) -> None:
    response = await client.post(
        f"{API}/admin/approve", json={"type": "question", "id": str(uuid.uuid4())}, headers=admin_headers
    )
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "QUESTION_NOT_FOUND"


@pytest.mark.asyncio
async def test_approve_rejects_other_types(client: AsyncClient, admin_headers) -> None:
    response = await client.post(
        f"{API}/admin/approve", json={"type": "roadmap", "id": str(uuid.uuid4())}, headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_create_question(client: AsyncClient, admin_headers) -> None:
    payload = {
        "title": "Explain event delegation",
        "content": "How does event delegation work?",
        "type": "conceptual",
        "difficulty": "easy",
        "technologies": ["JavaScript"],
        "solution": {
            "explanation": "Listen on an ancestor",
            "timeComplexity": "O(1)",
            "spaceComplexity": "O(1)",
        },
    }
    response = await client.post(f"{API}/admin/questions", json=payload, headers=admin_headers)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["submittedBy"] == "admin@test.dev"
    assert data["isApproved"] is False
    assert data["solution"]["codeExamples"] == []


@pytest.mark.asyncio
async def test_update_question(client: AsyncClient, admin_headers, make_question) -> None:
    question = await make_question("Old title")

    response = await client.put(
        f"{API}/admin/questions/{question.id}",
        json={"title": "New title", "tags": ["updated"], "difficulty": None},
        headers=admin_headers,
    )
    assert response.status_code == 200

    detail = (await client.get(f"{API}/questions/{question.id}")).json()["data"]
    assert detail["title"] == "New title"
    assert detail["tags"] == ["updated"]
    assert detail["difficulty"] == "medium"

    missing = await client.put(
        f"{API}/admin/questions/{uuid.uuid4()}", json={"title": "x"}, headers=admin_headers
    )
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_delete_question(client: AsyncClient, admin_headers, make_question) -> None:
    question = await make_question()

    response = await client.delete(f"{API}/admin/question/{question.id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"] == {"type": "question", "id": question.id}

    again = await client.delete(f"{API}/admin/question/{question.id}", headers=admin_headers)
    assert again.status_code == 404
    assert again.json()["error"]["code"] == "CONTENT_NOT_FOUND"


@pytest.mark.asyncio
async def test_delete_role_cascades_to_roadmaps(client: AsyncClient, admin_headers, make_role, make_roadmap) -> None:
    role = await make_role()
    roadmap = await make_roadmap(role, Level.JUNIOR, topics={"Basics": []})

    response = await client.delete(f"{API}/admin/role/{role.id}", headers=admin_headers)
    assert response.status_code == 200

    gone = await client.get(f"{API}/roadmaps/id/{roadmap.id}")
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_delete_question_in_use_conflicts(client: AsyncClient, admin_headers, make_role, make_question) -> None:
    role = await make_role()
    question = await make_question(difficulty=Difficulty.EASY)
    started = await client.post(
        f"{API}/mock-interviews/start",
        json={"roleId": role.id, "level": "junior", "questionCount": 1},
    )
    assert started.status_code == 201

    response = await client.delete(f"{API}/admin/question/{question.id}", headers=admin_headers)
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONFLICT"


@pytest.mark.asyncio
async def test_delete_invalid_content_type(client: AsyncClient, admin_headers) -> None:
    response = await client.delete(f"{API}/admin/widget/{uuid.uuid4()}", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_CONTENT_TYPE"

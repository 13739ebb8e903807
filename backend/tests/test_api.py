"""End-to-end tests for the public API through the ASGI app."""

import uuid

import pytest
from fakeredis import FakeAsyncRedis, FakeServer
from httpx import AsyncClient

from techprep.core.cache import cache_service
from techprep.models import Difficulty, Level

API = "/api/v1"


# ============================================================================
# Envelopes and middleware
# ============================================================================


@pytest.mark.asyncio
async def test_success_envelope_and_headers(client: AsyncClient, make_question) -> None:
    await make_question()

    response = await client.get(f"{API}/questions", headers={"X-Request-ID": "req-123"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Found 1 questions"
    assert body["timestamp"].endswith("Z")
    assert set(body["data"]) == {"questions", "pagination", "filters"}
    assert body["data"]["pagination"] == {
        "page": 1,
        "limit": 20,
        "total": 1,
        "totalPages": 1,
        "hasNext": False,
        "hasPrev": False,
    }

    assert response.headers["X-Request-ID"] == "req-123"
    assert response.headers["X-Response-Time"].endswith("ms")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-RateLimit-Limit"] == "100000"


@pytest.mark.asyncio
async def test_unknown_route(client: AsyncClient) -> None:
    response = await client.get(f"{API}/nope")
    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "NOT_FOUND"
    assert error["message"] == f"Route GET {API}/nope not found"
    assert error["requestId"] == response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_malformed_uuid_is_a_validation_error(client: AsyncClient) -> None:
    response = await client.get(f"{API}/questions/not-a-uuid")
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"][0]["field"] == "path.question_id"


# ============================================================================
# Questions
# ============================================================================


@pytest.mark.asyncio
async def test_question_list_params(client: AsyncClient, make_question) -> None:
    await make_question("React", technologies=["React"], difficulty=Difficulty.EASY)
    await make_question("Go", technologies=["Go"], difficulty=Difficulty.HARD)
    await make_question("Java", technologies=["Java"])

    comma = await client.get(f"{API}/questions", params={"technologies": "React,Go", "sortBy": "title", "sortOrder": "asc"})
    assert [q["title"] for q in comma.json()["data"]["questions"]] == ["Go", "React"]

    repeated = await client.get(f"{API}/questions?difficulty=easy&difficulty=hard&sortBy=difficulty&sortOrder=asc")
    assert [q["title"] for q in repeated.json()["data"]["questions"]] == ["React", "Go"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "query",
    ["sortBy=views", "sortOrder=sideways", "difficulty=impossible", "type=essay", "page=abc"],
)
async def test_question_list_rejects_bad_params(client: AsyncClient, query: str) -> None:
    response = await client.get(f"{API}/questions?{query}")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_question_detail(client: AsyncClient, make_question) -> None:
    question = await make_question("Detail", companies=["Google"])

    response = await client.get(f"{API}/questions/{question.id}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == question.id
    assert data["companies"] == ["Google"]
    assert data["rating"] == "4.00"
    assert data["ratingCount"] == 0

    missing = await client.get(f"{API}/questions/{uuid.uuid4()}")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "QUESTION_NOT_FOUND"


@pytest.mark.asyncio
async def test_clear_question_cache(client: AsyncClient, make_question) -> None:
    await make_question()
    await client.get(f"{API}/questions")

    response = await client.delete(f"{API}/questions/cache")
    assert response.status_code == 200
    assert response.json()["data"]["removed"] >= 1


# ============================================================================
# Roadmaps
# ============================================================================


@pytest.mark.asyncio
async def test_roadmap_routes(client: AsyncClient, make_role, make_roadmap) -> None:
    role = await make_role("Frontend Developer")
    roadmap = await make_roadmap(role, Level.JUNIOR, topics={"Basics": []})

    roles = await client.get(f"{API}/roadmaps/roles")
    assert roles.status_code == 200
    assert roles.json()["data"]["total"] == 1
    assert roles.json()["data"]["roles"][0]["roadmaps"]["junior"]["topicCount"] == 1

    by_slug = await client.get(f"{API}/roadmaps/frontend-developer/junior")
    assert by_slug.status_code == 200
    assert by_slug.json()["data"]["id"] == roadmap.id
    assert by_slug.json()["data"]["roleName"] == "Frontend Developer"

    by_id = await client.get(f"{API}/roadmaps/id/{roadmap.id}")
    assert by_id.json()["data"]["topics"][0]["title"] == "Basics"

    missing = await client.get(f"{API}/roadmaps/frontend-developer/senior")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "ROADMAP_NOT_FOUND"

    bad_level = await client.get(f"{API}/roadmaps/frontend-developer/expert")
    assert bad_level.status_code == 400

    cleared = await client.delete(f"{API}/roadmaps/cache")
    assert cleared.json()["data"]["removed"] == 3


# ============================================================================
# Mock interviews
# ============================================================================


@pytest.mark.asyncio
async def test_mock_interview_flow(client: AsyncClient, make_role, make_question) -> None:
    role = await make_role("Frontend Developer")
    await make_question("Only question", difficulty=Difficulty.EASY)

    started = await client.post(
        f"{API}/mock-interviews/start",
        json={"roleId": role.id, "level": "junior", "questionCount": 3, "timeLimit": 15},
    )
    assert started.status_code == 201
    session = started.json()["data"]
    assert session["status"] == "active"
    assert session["totalQuestions"] == 1
    assert session["startTime"].endswith("Z")

    details = await client.get(f"{API}/mock-interviews/{session['id']}")
    slot = details.json()["data"]["questions"][0]
    assert slot["timeLimit"] == 15
    assert slot["question"]["title"] == "Only question"

    early = await client.get(f"{API}/mock-interviews/{session['id']}/feedback")
    assert early.status_code == 400
    assert early.json()["error"]["code"] == "INTERVIEW_NOT_COMPLETED"

    blank = await client.post(
        f"{API}/mock-interviews/{session['id']}/submit",
        json={"questionId": slot["questionId"], "userCode": "   "},
    )
    assert blank.status_code == 400

    submitted = await client.post(
        f"{API}/mock-interviews/{session['id']}/submit",
        json={"questionId": slot["questionId"], "userCode": "x"},
    )
    assert submitted.status_code == 200
    assert submitted.json()["message"] == "Mock interview completed successfully"
    assert submitted.json()["data"]["isComplete"] is True
    assert submitted.json()["data"]["feedback"]["score"] == 68

    feedback = await client.get(f"{API}/mock-interviews/{session['id']}/feedback")
    assert feedback.status_code == 200
    assert feedback.json()["data"]["overallScore"] == 68.0

    ended = await client.post(f"{API}/mock-interviews/{session['id']}/end")
    assert ended.status_code == 400
    assert ended.json()["error"]["code"] == "INTERVIEW_NOT_ACTIVE"


@pytest.mark.asyncio
async def test_mock_interview_start_validation(client: AsyncClient, make_role) -> None:
    role = await make_role()
    too_many = await client.post(
        f"{API}/mock-interviews/start", json={"roleId": role.id, "level": "junior", "questionCount": 11}
    )
    assert too_many.status_code == 400

    unknown = await client.post(
        f"{API}/mock-interviews/start", json={"roleId": str(uuid.uuid4()), "level": "junior"}
    )
    assert unknown.status_code == 404
    assert unknown.json()["error"]["code"] == "ROLE_NOT_FOUND"

    missing = await client.get(f"{API}/mock-interviews/{uuid.uuid4()}")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "INTERVIEW_NOT_FOUND"


@pytest.mark.asyncio
async def test_cleanup_endpoint(client: AsyncClient) -> None:
    response = await client.post(f"{API}/mock-interviews/cleanup")
    assert response.status_code == 200
    assert response.json()["data"] == {"cleanedCount": 0}


# ============================================================================
# Health and status
# ============================================================================


@pytest.mark.asyncio
async def test_health_endpoints(client: AsyncClient) -> None:
    basic = await client.get("/health")
    assert basic.status_code == 200
    assert basic.json()["environment"] == "test"
    assert "X-RateLimit-Limit" not in basic.headers

    detailed = await client.get("/health/detailed")
    assert detailed.status_code == 200
    services = detailed.json()["services"]
    assert services["database"]["status"] == "healthy"
    assert services["redis"]["status"] == "healthy"

    assert (await client.get("/health/ready")).status_code == 200
    assert (await client.get("/health/live")).json()["message"] == "Service is alive"


@pytest.mark.asyncio
async def test_readiness_fails_without_redis(client: AsyncClient) -> None:
    server = FakeServer()
    server.connected = False
    cache_service.use_client(FakeAsyncRedis(server=server, decode_responses=True))

    response = await client.get("/health/ready")
    assert response.status_code == 503
    assert response.json()["issues"] == {"database": None, "redis": "Redis connection failed"}


@pytest.mark.asyncio
async def test_status_endpoints(client: AsyncClient) -> None:
    status = await client.get(f"{API}/status")
    assert status.json()["data"]["features"]["mockInterviews"] == "available"

    version = await client.get(f"{API}/status/version")
    assert version.json()["data"]["apiVersion"] == "v1"

    capabilities = await client.get(f"{API}/status/capabilities")
    assert "mock-interviews" in capabilities.json()["data"]["features"]

    root = await client.get("/")
    assert root.json()["api"] == API

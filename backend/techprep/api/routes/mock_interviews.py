"""Mock interview API routes."""

from uuid import UUID

from fastapi import APIRouter, status

from techprep.api.deps import DBSession
from techprep.core.errors import NotFoundError
from techprep.core.logging import get_logger
from techprep.schemas.common import success_response
from techprep.schemas.mock_interview import StartMockInterviewRequest, SubmitAnswerRequest
from techprep.services import mock_interview_service

logger = get_logger(__name__)
router = APIRouter(prefix="/mock-interviews", tags=["mock-interviews"])


@router.post("/start", status_code=status.HTTP_201_CREATED)
async def start_mock_interview(data: StartMockInterviewRequest, db: DBSession) -> dict:
    session = await mock_interview_service.start_mock_interview(db, data)
    return success_response(session, message="Mock interview started successfully")


@router.post("/cleanup")
async def cleanup_abandoned_sessions(db: DBSession) -> dict:
    cleaned = await mock_interview_service.cleanup_abandoned_sessions(db)
    return success_response({"cleanedCount": cleaned}, message=f"Cleaned up {cleaned} abandoned sessions")


@router.get("/{interview_id}")
async def get_mock_interview(interview_id: UUID, db: DBSession) -> dict:
    interview = await mock_interview_service.get_mock_interview_by_id(db, str(interview_id))
    if interview is None:
        raise NotFoundError("Mock interview not found", code="INTERVIEW_NOT_FOUND")
    return success_response(interview)


@router.post("/{interview_id}/submit")
async def submit_answer(interview_id: UUID, data: SubmitAnswerRequest, db: DBSession) -> dict:
    result = await mock_interview_service.submit_answer(
        db, str(interview_id), str(data.question_id), data.user_code
    )
    message = "Mock interview completed successfully" if result.is_complete else "Answer submitted successfully"
    return success_response(result, message=message)


@router.get("/{interview_id}/feedback")
async def get_interview_feedback(interview_id: UUID, db: DBSession) -> dict:
    summary = await mock_interview_service.get_interview_feedback(db, str(interview_id))
    return success_response(summary, message="Interview feedback retrieved successfully")


@router.post("/{interview_id}/end")
async def end_mock_interview(interview_id: UUID, db: DBSession) -> dict:
    session = await mock_interview_service.end_mock_interview(db, str(interview_id))
    return success_response(session, message="Mock interview ended")

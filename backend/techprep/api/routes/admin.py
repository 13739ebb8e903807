"""Admin API routes. Every endpoint requires an admin JWT."""

from uuid import UUID

from fastapi import APIRouter, status

from techprep.api.deps import AdminUser, DBSession
from techprep.core.errors import NotFoundError
from techprep.core.logging import get_logger
from techprep.schemas.admin import ApproveRequest
from techprep.schemas.common import success_response
from techprep.schemas.question import QuestionCreate, QuestionUpdate
from techprep.services import admin_service

logger = get_logger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/content")
async def get_content_overview(db: DBSession, admin: AdminUser) -> dict:
    logger.info("Content overview requested", admin=admin.get("email"))
    overview = await admin_service.get_content_overview(db)
    return success_response(overview, message="Content overview retrieved successfully")


@router.get("/analytics")
async def get_platform_analytics(db: DBSession, admin: AdminUser) -> dict:
    logger.info("Platform analytics requested", admin=admin.get("email"))
    analytics = await admin_service.get_platform_analytics(db)
    return success_response(analytics, message="Platform analytics retrieved successfully")


@router.post("/approve")
async def approve_content(data: ApproveRequest, db: DBSession, admin: AdminUser) -> dict:
    approved = await admin_service.approve_question(db, str(data.id))
    if not approved:
        raise NotFoundError(f"Question not found with ID: {data.id}", code="QUESTION_NOT_FOUND")
    logger.info("Content approved", admin=admin.get("email"), content_type=data.type, content_id=str(data.id))
    return success_response({"type": data.type, "id": str(data.id)}, message="Question approved successfully")


@router.post("/questions", status_code=status.HTTP_201_CREATED)
async def create_question(data: QuestionCreate, db: DBSession, admin: AdminUser) -> dict:
    question = await admin_service.create_question(db, data, submitted_by=admin.get("email"))
    return success_response(question, message="Question created successfully")


@router.put("/questions/{question_id}")
async def update_question(
    question_id: UUID,
    data: QuestionUpdate,
    db: DBSession,
    admin: AdminUser,
) -> dict:
    updated = await admin_service.update_question(db, str(question_id), data)
    if not updated:
        raise NotFoundError(f"Question not found with ID: {question_id}", code="QUESTION_NOT_FOUND")
    logger.info("Question edited", admin=admin.get("email"), question_id=str(question_id))
    return success_response({"id": str(question_id)}, message="Question updated successfully")


@router.delete("/{content_type}/{content_id}")
async def delete_content(
    content_type: str,
    content_id: UUID,
    db: DBSession,
    admin: AdminUser,
) -> dict:
    deleted = await admin_service.delete_content(db, content_type, str(content_id))
    if not deleted:
        raise NotFoundError(
            f"{content_type} not found with ID: {content_id}",
            code="CONTENT_NOT_FOUND",
        )
    logger.info("Content removed", admin=admin.get("email"), content_type=content_type)
    return success_response(
        {"type": content_type, "id": str(content_id)},
        message=f"{content_type} deleted successfully",
    )

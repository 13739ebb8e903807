"""Question API routes."""

from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, Query
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from techprep.api.deps import DBSession
from techprep.core.errors import NotFoundError
from techprep.core.logging import get_logger
from techprep.schemas.common import success_response
from techprep.schemas.question import QuestionFilters
from techprep.services import question_service

logger = get_logger(__name__)
router = APIRouter(prefix="/questions", tags=["questions"])

ListParam = Annotated[list[str] | None, Query()]


def split_list(values: list[str] | None) -> list[str]:
    """Accept both ``?tag=a&tag=b`` and ``?tag=a,b``."""
    items: list[str] = []
    for value in values or []:
        items.extend(part.strip() for part in value.split(",") if part.strip())
    return items


@router.get("")
async def search_questions(
    db: DBSession,
    search: str | None = None,
    technologies: ListParam = None,
    difficulty: ListParam = None,
    roles: ListParam = None,
    companies: ListParam = None,
    type: ListParam = None,
    tags: ListParam = None,
    page: int = 1,
    limit: int = 20,
    sort_by: Annotated[Literal["title", "difficulty", "rating", "createdAt"], Query(alias="sortBy")] = "createdAt",
    sort_order: Annotated[Literal["asc", "desc"], Query(alias="sortOrder")] = "desc",
) -> dict:
    """Search approved questions with filters, sorting and pagination."""
    try:
        filters = QuestionFilters(
            search=search or None,
            technologies=split_list(technologies),
            difficulty=split_list(difficulty),
            roles=split_list(roles),
            companies=split_list(companies),
            type=split_list(type),
            tags=split_list(tags),
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False)) from e

    result = await question_service.search_questions(db, filters)
    return success_response(result, message=f"Found {len(result.questions)} questions")


@router.delete("/cache")
async def clear_question_cache(pattern: str | None = None) -> dict:
    removed = await question_service.clear_cache(pattern)
    return success_response({"removed": removed}, message="Questions cache cleared successfully")


@router.get("/{question_id}")
async def get_question(question_id: UUID, db: DBSession) -> dict:
    question = await question_service.get_question_by_id(db, str(question_id))
    if question is None:
        raise NotFoundError(f"Question not found with ID: {question_id}", code="QUESTION_NOT_FOUND")
    return success_response(question, message="Question retrieved successfully")

"""Question service: search, detail lookup and filter options."""

import json

from sqlalchemy import String, and_, case, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from techprep.core.cache import CacheKeys, cache_service
from techprep.core.logging import get_logger
from techprep.models.enums import Difficulty
from techprep.models.question import Question
from techprep.schemas.common import Pagination
from techprep.schemas.question import (
    FilterOptions,
    QuestionDetail,
    QuestionFilters,
    QuestionSearchResult,
    QuestionSummary,
)

logger = get_logger(__name__)

DETAIL_CACHE_TTL = 1800
SEARCH_CACHE_TTL = 600
FILTER_OPTIONS_CACHE_TTL = 3600
VIEW_COUNTER_TTL = 2 * 24 * 3600

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def json_list_contains_any(column, values: list[str]):
    """Match rows whose JSON list column holds at least one of ``values``.

    Compares against each value's JSON encoding inside the serialized list,
    which works the same on SQLite and PostgreSQL.
    """
    as_text = cast(column, String)
    return or_(
        *(as_text.like(f"%{_escape_like(json.dumps(value))}%", escape="\\") for value in values)
    )


def normalize_paging(page: int | None, limit: int | None) -> tuple[int, int]:
    page = max(1, page or 1)
    limit = min(max(1, limit or DEFAULT_LIMIT), MAX_LIMIT)
    return page, limit


def _build_conditions(filters: QuestionFilters) -> list:
    conditions = [Question.is_approved.is_(True)]

    if filters.search:
        term = f"%{_escape_like(filters.search.strip())}%"
        conditions.append(
            or_(Question.title.ilike(term, escape="\\"), Question.content.ilike(term, escape="\\"))
        )
    if filters.difficulty:
        conditions.append(Question.difficulty.in_(filters.difficulty))
    if filters.type:
        conditions.append(Question.type.in_(filters.type))

    for column, values in (
        (Question.technologies, filters.technologies),
        (Question.roles, filters.roles),
        (Question.companies, filters.companies),
        (Question.tags, filters.tags),
    ):
        if values:
            conditions.append(json_list_contains_any(column, values))

    return conditions


def _order_by(filters: QuestionFilters) -> list:
    descending = filters.sort_order == "desc"
    if filters.sort_by == "difficulty":
        key = case(
            (Question.difficulty == Difficulty.EASY, 1),
            (Question.difficulty == Difficulty.MEDIUM, 2),
            (Question.difficulty == Difficulty.HARD, 3),
        )
    elif filters.sort_by == "rating":
        key = Question.rating
    elif filters.sort_by == "title":
        key = Question.title
    else:
        key = Question.created_at
    # id breaks ties so pages never overlap
    return [key.desc() if descending else key.asc(), Question.id.asc()]


async def search_questions(db: AsyncSession, filters: QuestionFilters) -> QuestionSearchResult:
    """Approved questions matching ``filters``, one page at a time."""
    page, limit = normalize_paging(filters.page, filters.limit)
    filters = filters.model_copy(update={"page": page, "limit": limit})

    cache_key = CacheKeys.questions_by_filter(filters.model_dump(mode="json"))
    cached = await cache_service.get(cache_key)
    if cached is not None:
        logger.debug("Question search served from cache", cache_key=cache_key)
        return QuestionSearchResult.model_validate(cached)

    where = and_(*_build_conditions(filters))
    total = (await db.execute(select(func.count()).select_from(Question).where(where))).scalar_one()

    rows = await db.execute(
        select(Question)
        .where(where)
        .order_by(*_order_by(filters))
        .limit(limit)
        .offset((page - 1) * limit)
    )
    questions = [QuestionSummary.model_validate(q) for q in rows.scalars().all()]

    result = QuestionSearchResult(
        questions=questions,
        pagination=Pagination.build(page, limit, total),
        filters=await get_filter_options(db),
    )
    await cache_service.set(cache_key, result.to_json(), SEARCH_CACHE_TTL)

    logger.info("Questions searched", total=total, page=page, limit=limit)
    return result


async def get_question_by_id(db: AsyncSession, question_id: str) -> QuestionDetail | None:
    """Approved question by id. Every successful lookup counts as a view."""
    cache_key = CacheKeys.question_by_id(question_id)
    cached = await cache_service.get(cache_key)
    if cached is not None:
        detail = QuestionDetail.model_validate(cached)
    else:
        result = await db.execute(
            select(Question).where(Question.id == question_id, Question.is_approved.is_(True))
        )
        question = result.scalar_one_or_none()
        if question is None:
            return None
        detail = QuestionDetail.model_validate(question)
        await cache_service.set(cache_key, detail.to_json(), DETAIL_CACHE_TTL)

    await cache_service.incr(CacheKeys.question_views(), ttl=VIEW_COUNTER_TTL)
    return detail


async def get_filter_options(db: AsyncSession) -> FilterOptions:
    """Sorted distinct list values across approved questions."""
    cache_key = CacheKeys.question_filter_options()
    cached = await cache_service.get(cache_key)
    if cached is not None:
        return FilterOptions.model_validate(cached)

    rows = await db.execute(
        select(Question.technologies, Question.roles, Question.companies, Question.tags).where(
            Question.is_approved.is_(True)
        )
    )
    technologies: set[str] = set()
    roles: set[str] = set()
    companies: set[str] = set()
    tags: set[str] = set()
    for tech_list, role_list, company_list, tag_list in rows.all():
        technologies.update(tech_list or [])
        roles.update(role_list or [])
        companies.update(company_list or [])
        tags.update(tag_list or [])

    options = FilterOptions(
        available_technologies=sorted(technologies),
        available_roles=sorted(roles),
        available_companies=sorted(companies),
        available_tags=sorted(tags),
    )
    await cache_service.set(cache_key, options.to_json(), FILTER_OPTIONS_CACHE_TTL)
    return options


async def clear_cache(pattern: str | None = None) -> int:
    if pattern:
        removed = await cache_service.delete_pattern(pattern)
    else:
        removed = await cache_service.delete_pattern("questions:*")
        removed += await cache_service.delete_pattern("question:*")
    logger.info("Question cache cleared", pattern=pattern, removed=removed)
    return removed

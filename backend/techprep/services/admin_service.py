"""Admin service: dashboard statistics and content moderation."""

from collections import Counter
from datetime import datetime, time

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from techprep.core.cache import CacheKeys, cache_service
from techprep.core.database import utcnow
from techprep.core.errors import BadRequestError
from techprep.core.logging import get_logger
from techprep.models.enums import ContentType, Difficulty, InterviewStatus, Level, QuestionType
from techprep.models.mock_interview import MockInterview
from techprep.models.question import Question
from techprep.models.roadmap import Roadmap
from techprep.models.role import Role
from techprep.schemas.admin import (
    ContentOverview,
    MockInterviewAnalytics,
    MockInterviewCounts,
    OverviewTotals,
    PlatformAnalytics,
    QuestionAnalytics,
    QuestionCounts,
    RoadmapCounts,
    RoleCount,
    RoleCounts,
    TechnologyCount,
    UsageAnalytics,
)
from techprep.schemas.question import QuestionCreate, QuestionDetail, QuestionUpdate

logger = get_logger(__name__)

ADMIN_CACHE_TTL = 300
TOP_TECHNOLOGIES = 10
TOP_ROLES = 5

CONTENT_CACHE_PATTERNS = ("admin:*", "questions:*", "question:*", "roadmaps:*", "roadmap:*", "roles:*")

_DELETABLE = {
    ContentType.QUESTION: Question,
    ContentType.ROADMAP: Roadmap,
    ContentType.ROLE: Role,
}


def _count_where(condition):
    return func.count(case((condition, 1)))


async def clear_content_caches() -> None:
    for pattern in CONTENT_CACHE_PATTERNS:
        await cache_service.delete_pattern(pattern)
    logger.debug("Content caches cleared")


# ============================================================================
# Statistics
# ============================================================================


async def _question_counts(db: AsyncSession) -> QuestionCounts:
    row = (
        await db.execute(
            select(
                func.count(Question.id),
                _count_where(Question.is_approved.is_(True)),
                *(_count_where(Question.difficulty == d) for d in Difficulty),
                *(_count_where(Question.type == t) for t in QuestionType),
            )
        )
    ).one()
    total, approved, *rest = (int(v) for v in row)
    by_difficulty = dict(zip((d.value for d in Difficulty), rest[: len(Difficulty)], strict=True))
    by_type = dict(zip((t.value for t in QuestionType), rest[len(Difficulty) :], strict=True))
    return QuestionCounts(
        total=total,
        approved=approved,
        pending=total - approved,
        by_difficulty=by_difficulty,
        by_type=by_type,
    )


async def _roadmap_counts(db: AsyncSession) -> RoadmapCounts:
    row = (
        await db.execute(
            select(func.count(Roadmap.id), *(_count_where(Roadmap.level == lv) for lv in Level))
        )
    ).one()
    total, *levels = (int(v) for v in row)
    by_level = dict(zip((lv.value for lv in Level), levels, strict=True))
    return RoadmapCounts(total=total, by_level=by_level)


async def _interview_counts(db: AsyncSession) -> MockInterviewCounts:
    row = (
        await db.execute(
            select(
                func.count(MockInterview.id),
                *(_count_where(MockInterview.status == s) for s in InterviewStatus),
            )
        )
    ).one()
    total, *by_status = (int(v) for v in row)
    counts = dict(zip((s.value for s in InterviewStatus), by_status, strict=True))
    return MockInterviewCounts(total=total, **counts)


async def get_content_overview(db: AsyncSession) -> ContentOverview:
    cache_key = CacheKeys.admin_content_overview()
    cached = await cache_service.get(cache_key)
    if cached is not None:
        return ContentOverview.model_validate(cached)

    role_total = (await db.execute(select(func.count(Role.id)))).scalar_one()
    overview = ContentOverview(
        questions=await _question_counts(db),
        roadmaps=await _roadmap_counts(db),
        roles=RoleCounts(total=role_total),
        mock_interviews=await _interview_counts(db),
    )
    await cache_service.set(cache_key, overview.to_json(), ADMIN_CACHE_TTL)
    logger.info("Content overview generated")
    return overview


async def get_platform_analytics(db: AsyncSession) -> PlatformAnalytics:
    cache_key = CacheKeys.admin_analytics()
    cached = await cache_service.get(cache_key)
    if cached is not None:
        return PlatformAnalytics.model_validate(cached)

    questions = await _question_counts(db)
    roadmaps = await _roadmap_counts(db)
    interviews = await _interview_counts(db)
    role_total = (await db.execute(select(func.count(Role.id)))).scalar_one()

    average_rating = (await db.execute(select(func.avg(Question.rating)))).scalar_one()

    technology_counts: Counter[str] = Counter()
    for technologies in (await db.execute(select(Question.technologies))).scalars():
        technology_counts.update(set(technologies or []))

    average_score = (
        await db.execute(
            select(func.avg(MockInterview.overall_score)).where(MockInterview.overall_score.is_not(None))
        )
    ).scalar_one()
    level_rows = await db.execute(
        select(MockInterview.level, func.count(MockInterview.id)).group_by(MockInterview.level)
    )
    by_level = {lv.value: 0 for lv in Level}
    for level, count in level_rows.all():
        by_level[Level(level).value] = count
    completion_rate = interviews.completed / interviews.total * 100 if interviews.total else 0.0

    start_of_day = datetime.combine(utcnow().date(), time.min)
    started_today = (
        await db.execute(
            select(func.count(MockInterview.id)).where(MockInterview.created_at >= start_of_day)
        )
    ).scalar_one()
    interview_count = func.count(MockInterview.id).label("interview_count")
    top_roles = await db.execute(
        select(Role.name, interview_count)
        .join(MockInterview, MockInterview.role_id == Role.id)
        .group_by(Role.name)
        .order_by(interview_count.desc(), Role.name)
        .limit(TOP_ROLES)
    )
    views_today = await cache_service.get(CacheKeys.question_views())

    analytics = PlatformAnalytics(
        overview=OverviewTotals(
            total_questions=questions.total,
            total_roadmaps=roadmaps.total,
            total_roles=role_total,
            total_mock_interviews=interviews.total,
        ),
        questions=QuestionAnalytics(
            total_questions=questions.total,
            approved_questions=questions.approved,
            pending_questions=questions.pending,
            average_rating=round(float(average_rating or 0), 2),
            top_technologies=[
                TechnologyCount(technology=name, count=count)
                for name, count in sorted(technology_counts.items(), key=lambda kv: (-kv[1], kv[0]))[
                    :TOP_TECHNOLOGIES
                ]
            ],
            questions_by_difficulty=questions.by_difficulty,
            questions_by_type=questions.by_type,
        ),
        mock_interviews=MockInterviewAnalytics(
            total_interviews=interviews.total,
            completed_interviews=interviews.completed,
            average_score=round(float(average_score or 0), 2),
            completion_rate=round(completion_rate, 2),
            interviews_by_level=by_level,
        ),
        usage=UsageAnalytics(
            questions_viewed_today=int(views_today or 0),
            mock_interviews_started_today=started_today,
            top_roles=[RoleCount(role=name, count=count) for name, count in top_roles.all()],
        ),
    )
    await cache_service.set(cache_key, analytics.to_json(), ADMIN_CACHE_TTL)
    logger.info("Platform analytics generated")
    return analytics


# ============================================================================
# Moderation
# ============================================================================


async def approve_question(db: AsyncSession, question_id: str) -> bool:
    result = await db.execute(
        update(Question)
        .where(Question.id == question_id)
        .values(is_approved=True, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    if result.rowcount == 0:
        logger.warning("Question not found for approval", question_id=question_id)
        return False

    await clear_content_caches()
    logger.info("Question approved", question_id=question_id)
    return True


async def update_question(db: AsyncSession, question_id: str, data: QuestionUpdate) -> bool:
    """Apply the fields present in ``data``. False when the question does not exist."""
    question = await db.get(Question, question_id)
    if question is None:
        logger.warning("Question not found for update", question_id=question_id)
        return False

    # Explicit nulls are ignored except for solution, which may be cleared
    changes = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field == "solution"
    }
    if data.solution is not None:
        changes["solution"] = data.solution.model_dump(mode="json", by_alias=True)
    for field, value in changes.items():
        setattr(question, field, value)

    await db.commit()
    await clear_content_caches()
    logger.info("Question updated", question_id=question_id, fields=sorted(changes))
    return True


async def create_question(
    db: AsyncSession,
    data: QuestionCreate,
    submitted_by: str | None = None,
) -> QuestionDetail:
    question = Question(
        title=data.title,
        content=data.content,
        type=data.type,
        difficulty=data.difficulty,
        technologies=data.technologies,
        roles=data.roles,
        companies=data.companies,
        tags=data.tags,
        solution=data.solution.model_dump(mode="json", by_alias=True) if data.solution else None,
        submitted_by=submitted_by,
        is_approved=data.is_approved,
    )
    db.add(question)
    await db.commit()
    await db.refresh(question)

    await clear_content_caches()
    logger.info("Question created", question_id=question.id, submitted_by=submitted_by)
    return QuestionDetail.model_validate(question)


async def delete_content(db: AsyncSession, content_type: ContentType | str, content_id: str) -> bool:
    """Delete a question, roadmap or role. Dependent rows go with it via FK cascades."""
    try:
        content_type = ContentType(content_type)
    except ValueError as e:
        raise BadRequestError(
            f"Invalid content type: {content_type}. Must be one of: question, roadmap, role",
            code="INVALID_CONTENT_TYPE",
        ) from e
    model = _DELETABLE[content_type]

    result = await db.execute(delete(model).where(model.id == content_id))
    await db.commit()
    if result.rowcount == 0:
        logger.warning("Content not found for deletion", content_type=content_type.value, content_id=content_id)
        return False

    await clear_content_caches()
    logger.info("Content deleted", content_type=content_type.value, content_id=content_id)
    return True

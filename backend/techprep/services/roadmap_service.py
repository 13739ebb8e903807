"""Roadmap service: roles, roadmaps and their topics.

Reads are read-through cached; see ``techprep.core.cache``.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from techprep.core.cache import CacheKeys, cache_service
from techprep.core.logging import get_logger
from techprep.models.enums import Level
from techprep.models.roadmap import Roadmap, Topic, TopicQuestion
from techprep.models.role import Role
from techprep.schemas.roadmap import (
    RoadmapDetail,
    RoadmapSummary,
    RoleWithRoadmaps,
    TopicDetail,
    TopicQuestion as TopicQuestionSchema,
    TopicResource,
)

logger = get_logger(__name__)

ROLES_CACHE_TTL = 3600
ROADMAP_CACHE_TTL = 1800


def role_slug_to_name(slug: str) -> str:
    """``frontend-developer`` -> ``Frontend Developer``."""
    return " ".join(word[:1].upper() + word[1:] for word in slug.split("-") if word)


# ============================================================================
# Queries
# ============================================================================


async def get_all_roles(db: AsyncSession) -> list[RoleWithRoadmaps]:
    """All roles ordered by name, each with its roadmap summaries keyed by level."""
    cache_key = CacheKeys.all_roles()
    cached = await cache_service.get(cache_key)
    if cached is not None:
        logger.debug("Roles served from cache")
        return [RoleWithRoadmaps.model_validate(item) for item in cached]

    roles = (await db.execute(select(Role).order_by(Role.name))).scalars().all()

    topic_count = func.count(Topic.id).label("topic_count")
    rows = await db.execute(
        select(Roadmap, topic_count)
        .outerjoin(Topic, Topic.roadmap_id == Roadmap.id)
        .group_by(Roadmap.id)
    )
    summaries: dict[str, dict[Level, RoadmapSummary]] = {}
    for roadmap, count in rows.all():
        summaries.setdefault(roadmap.role_id, {})[roadmap.level] = RoadmapSummary(
            id=roadmap.id,
            level=roadmap.level,
            title=roadmap.title,
            description=roadmap.description,
            estimated_hours=roadmap.estimated_hours,
            topic_count=count,
        )

    result = []
    for role in roles:
        by_level = summaries.get(role.id, {})
        result.append(
            RoleWithRoadmaps(
                id=role.id,
                name=role.name,
                description=role.description,
                technologies=role.technologies or [],
                roadmaps={level: by_level[level] for level in Level if level in by_level},
            )
        )

    await cache_service.set(cache_key, [r.to_json() for r in result], ROLES_CACHE_TTL)
    logger.info("Roles loaded", count=len(result))
    return result


def _roadmap_query():
    return select(Roadmap, Role.name).join(Role, Roadmap.role_id == Role.id).options(
        selectinload(Roadmap.topics)
        .selectinload(Topic.topic_questions)
        .selectinload(TopicQuestion.question)
    )


def _to_detail(roadmap: Roadmap, role_name: str) -> RoadmapDetail:
    topics = []
    for topic in sorted(roadmap.topics, key=lambda t: t.order):
        linked = sorted((link.question for link in topic.topic_questions), key=lambda q: q.title)
        topics.append(
            TopicDetail(
                id=topic.id,
                title=topic.title,
                description=topic.description,
                order=topic.order,
                resources=[TopicResource.model_validate(r) for r in topic.resources or []],
                question_count=len(linked),
                questions=[
                    TopicQuestionSchema(id=q.id, title=q.title, difficulty=q.difficulty, type=q.type)
                    for q in linked
                ],
            )
        )

    return RoadmapDetail(
        id=roadmap.id,
        role_id=roadmap.role_id,
        role_name=role_name,
        level=roadmap.level,
        title=roadmap.title,
        description=roadmap.description,
        estimated_hours=roadmap.estimated_hours,
        prerequisites=roadmap.prerequisites or [],
        topics=topics,
        created_at=roadmap.created_at,
        updated_at=roadmap.updated_at,
    )


async def get_roadmap_by_role_and_level(
    db: AsyncSession,
    role_name: str,
    level: Level,
) -> RoadmapDetail | None:
    """Roadmap for a role (by exact name) at a level, with topics and linked questions."""
    level = Level(level)
    cache_key = CacheKeys.roadmap_by_role(role_name, level.value)
    cached = await cache_service.get(cache_key)
    if cached is not None:
        logger.debug("Roadmap served from cache", role=role_name, level=level.value)
        return RoadmapDetail.model_validate(cached)

    result = await db.execute(
        _roadmap_query().where(Role.name == role_name, Roadmap.level == level).limit(1)
    )
    row = result.first()
    if row is None:
        return None

    detail = _to_detail(*row)
    await cache_service.set(cache_key, detail.to_json(), ROADMAP_CACHE_TTL)
    return detail


async def get_roadmap_by_id(db: AsyncSession, roadmap_id: str) -> RoadmapDetail | None:
    cache_key = CacheKeys.roadmap_by_id(roadmap_id)
    cached = await cache_service.get(cache_key)
    if cached is not None:
        logger.debug("Roadmap served from cache", roadmap_id=roadmap_id)
        return RoadmapDetail.model_validate(cached)

    result = await db.execute(_roadmap_query().where(Roadmap.id == roadmap_id))
    row = result.first()
    if row is None:
        return None

    detail = _to_detail(*row)
    await cache_service.set(cache_key, detail.to_json(), ROADMAP_CACHE_TTL)
    return detail


# ============================================================================
# Cache maintenance
# ============================================================================


async def clear_cache(pattern: str | None = None) -> int:
    """Drop cached roadmap data; everything roadmap-related when no pattern is given."""
    if pattern:
        removed = await cache_service.delete_pattern(pattern)
    else:
        removed = await cache_service.delete_pattern("roadmaps:*")
        removed += await cache_service.delete_pattern("roadmap:*")
        removed += await cache_service.delete(CacheKeys.all_roles())
    logger.info("Roadmap cache cleared", pattern=pattern, removed=removed)
    return removed

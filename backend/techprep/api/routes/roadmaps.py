"""Roadmap API routes.

``/roles``, ``/id/{id}`` and ``/cache`` are declared before the
``/{role}/{level}`` catch-all so they are matched first.
"""

from uuid import UUID

from fastapi import APIRouter

from techprep.api.deps import DBSession
from techprep.core.errors import NotFoundError
from techprep.core.logging import get_logger
from techprep.models.enums import Level
from techprep.schemas.common import success_response
from techprep.services import roadmap_service

logger = get_logger(__name__)
router = APIRouter(prefix="/roadmaps", tags=["roadmaps"])


@router.get("/roles")
async def list_roles(db: DBSession) -> dict:
    """List all roles with their roadmap summaries."""
    roles = await roadmap_service.get_all_roles(db)
    return success_response(
        {"roles": [r.to_json() for r in roles], "total": len(roles)},
        message="Roles retrieved successfully",
    )


@router.get("/id/{roadmap_id}")
async def get_roadmap_by_id(roadmap_id: UUID, db: DBSession) -> dict:
    roadmap = await roadmap_service.get_roadmap_by_id(db, str(roadmap_id))
    if roadmap is None:
        raise NotFoundError(f"Roadmap not found with ID: {roadmap_id}", code="ROADMAP_NOT_FOUND")
    return success_response(roadmap, message="Roadmap retrieved successfully")


@router.delete("/cache")
async def clear_roadmap_cache(pattern: str | None = None) -> dict:
    removed = await roadmap_service.clear_cache(pattern)
    return success_response({"removed": removed}, message="Cache cleared successfully")


@router.get("/{role}/{level}")
async def get_roadmap(role: str, level: Level, db: DBSession) -> dict:
    """Get the roadmap for a role slug (``frontend-developer``) at a level."""
    role_name = roadmap_service.role_slug_to_name(role)
    roadmap = await roadmap_service.get_roadmap_by_role_and_level(db, role_name, level)
    if roadmap is None:
        raise NotFoundError(
            f'Roadmap not found for role "{role_name}" at level "{level.value}"',
            code="ROADMAP_NOT_FOUND",
        )
    return success_response(roadmap, message="Roadmap retrieved successfully")

"""Shared schema building blocks: camelCase base model, enums, envelopes."""

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from techprep.models.enums import (
    ContentType,
    Difficulty,
    InterviewStatus,
    Level,
    QuestionType,
    ResourceType,
)

__all__ = [
    "CamelModel",
    "ContentType",
    "Difficulty",
    "InterviewStatus",
    "Level",
    "Pagination",
    "QuestionType",
    "ResourceType",
    "UTCDateTime",
    "iso_now",
    "success_response",
]


def _utc_iso(value: datetime) -> str:
    # DateTime columns hold naive UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


UTCDateTime = Annotated[datetime, PlainSerializer(_utc_iso, return_type=str, when_used="json")]


class CamelModel(BaseModel):
    """Serialized with camelCase keys; accepts either case on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = -(-total // limit) if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


def iso_now() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def success_response(data: Any = None, message: str | None = None) -> dict[str, Any]:
    """Build the ``{success, data, message?, timestamp}`` envelope."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json", by_alias=True)
    body: dict[str, Any] = {"success": True, "data": data}
    if message:
        body["message"] = message
    body["timestamp"] = iso_now()
    return body

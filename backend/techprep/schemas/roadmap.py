"""Roadmap schemas for API responses."""

from techprep.schemas.common import CamelModel, Difficulty, Level, QuestionType, ResourceType, UTCDateTime


class RoadmapSummary(CamelModel):
    id: str
    level: Level
    title: str
    description: str | None = None
    estimated_hours: int | None = None
    topic_count: int = 0


class RoleWithRoadmaps(CamelModel):
    """A role and its roadmaps keyed by level ("junior", "mid", "senior")."""

    id: str
    name: str
    description: str | None = None
    technologies: list[str] = []
    roadmaps: dict[Level, RoadmapSummary] = {}


class TopicResource(CamelModel):
    title: str
    url: str
    type: ResourceType


class TopicQuestion(CamelModel):
    id: str
    title: str
    difficulty: Difficulty
    type: QuestionType


class TopicDetail(CamelModel):
    id: str
    title: str
    description: str | None = None
    order: int
    resources: list[TopicResource] = []
    question_count: int = 0
    questions: list[TopicQuestion] = []


class RoadmapDetail(CamelModel):
    id: str
    role_id: str
    role_name: str
    level: Level
    title: str
    description: str | None = None
    estimated_hours: int | None = None
    prerequisites: list[str] = []
    topics: list[TopicDetail] = []
    created_at: UTCDateTime
    updated_at: UTCDateTime

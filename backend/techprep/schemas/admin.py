"""Admin dashboard schemas."""

from typing import Literal
from uuid import UUID

from pydantic import Field

from techprep.schemas.common import CamelModel


class ApproveRequest(CamelModel):
    type: Literal["question"]
    id: UUID


class QuestionCounts(CamelModel):
    total: int = 0
    approved: int = 0
    pending: int = 0
    by_difficulty: dict[str, int] = {}
    by_type: dict[str, int] = {}


class RoadmapCounts(CamelModel):
    total: int = 0
    by_level: dict[str, int] = {}


class RoleCounts(CamelModel):
    total: int = 0


class MockInterviewCounts(CamelModel):
    total: int = 0
    completed: int = 0
    active: int = 0
    abandoned: int = 0


class ContentOverview(CamelModel):
    questions: QuestionCounts
    roadmaps: RoadmapCounts
    roles: RoleCounts
    mock_interviews: MockInterviewCounts


class OverviewTotals(CamelModel):
    total_questions: int = 0
    total_roadmaps: int = 0
    total_roles: int = 0
    total_mock_interviews: int = 0


class TechnologyCount(CamelModel):
    technology: str
    count: int


class RoleCount(CamelModel):
    role: str
    count: int


class QuestionAnalytics(CamelModel):
    total_questions: int = 0
    approved_questions: int = 0
    pending_questions: int = 0
    average_rating: float = 0
    top_technologies: list[TechnologyCount] = []
    questions_by_difficulty: dict[str, int] = {}
    questions_by_type: dict[str, int] = {}


class MockInterviewAnalytics(CamelModel):
    total_interviews: int = 0
    completed_interviews: int = 0
    average_score: float = 0
    completion_rate: float = Field(default=0, description="Percent, two decimals")
    interviews_by_level: dict[str, int] = {}


class UsageAnalytics(CamelModel):
    questions_viewed_today: int = 0
    mock_interviews_started_today: int = 0
    top_roles: list[RoleCount] = []


class PlatformAnalytics(CamelModel):
    overview: OverviewTotals
    questions: QuestionAnalytics
    mock_interviews: MockInterviewAnalytics
    usage: UsageAnalytics

"""Pydantic schemas."""

from techprep.schemas.admin import ApproveRequest, ContentOverview, PlatformAnalytics
from techprep.schemas.common import CamelModel, Pagination, success_response
from techprep.schemas.mock_interview import (
    InterviewFeedback,
    MockInterviewSession,
    MockInterviewSummary,
    MockInterviewWithDetails,
    StartMockInterviewRequest,
    SubmitAnswerRequest,
    SubmitAnswerResult,
)
from techprep.schemas.question import (
    FilterOptions,
    QuestionCreate,
    QuestionDetail,
    QuestionFilters,
    QuestionSearchResult,
    QuestionSummary,
    QuestionUpdate,
)
from techprep.schemas.roadmap import RoadmapDetail, RoadmapSummary, RoleWithRoadmaps

__all__ = [
    "ApproveRequest",
    "CamelModel",
    "ContentOverview",
    "FilterOptions",
    "InterviewFeedback",
    "MockInterviewSession",
    "MockInterviewSummary",
    "MockInterviewWithDetails",
    "Pagination",
    "PlatformAnalytics",
    "QuestionCreate",
    "QuestionDetail",
    "QuestionFilters",
    "QuestionSearchResult",
    "QuestionSummary",
    "QuestionUpdate",
    "RoadmapDetail",
    "RoadmapSummary",
    "RoleWithRoadmaps",
    "StartMockInterviewRequest",
    "SubmitAnswerRequest",
    "SubmitAnswerResult",
    "success_response",
]

"""Mock interview schemas."""

from decimal import Decimal
from uuid import UUID

from pydantic import Field, field_validator

from techprep.schemas.common import CamelModel, Difficulty, InterviewStatus, Level, QuestionType, UTCDateTime


class StartMockInterviewRequest(CamelModel):
    role_id: UUID
    level: Level
    question_count: int | None = Field(default=None, ge=1, le=10)
    time_limit: int | None = Field(default=None, ge=5, le=120)  # minutes per question


class SubmitAnswerRequest(CamelModel):
    question_id: UUID
    user_code: str = Field(min_length=1)

    @field_validator("user_code")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("User code cannot be empty")
        return value


class InterviewFeedback(CamelModel):
    score: int
    strengths: list[str]
    improvements: list[str]
    code_quality: int
    problem_solving: int
    efficiency: int
    ai_analysis: str


class MockInterviewSession(CamelModel):
    id: str
    role_id: str
    level: Level
    status: InterviewStatus
    start_time: UTCDateTime
    end_time: UTCDateTime | None = None
    duration: int | None = None
    total_questions: int = 0
    completed_questions: int = 0
    overall_score: Decimal | None = None
    created_at: UTCDateTime
    updated_at: UTCDateTime


class InterviewRole(CamelModel):
    id: str
    name: str
    description: str | None = None


class InterviewQuestionContent(CamelModel):
    id: str
    title: str
    content: str
    type: QuestionType
    difficulty: Difficulty
    technologies: list[str] = []


class InterviewQuestionDetail(CamelModel):
    id: str
    question_id: str
    order: int
    time_limit: int
    user_code: str | None = None
    feedback: InterviewFeedback | None = None
    score: Decimal | None = None
    completed_at: UTCDateTime | None = None
    question: InterviewQuestionContent


class MockInterviewWithDetails(MockInterviewSession):
    role: InterviewRole
    questions: list[InterviewQuestionDetail] = []


class SubmitAnswerResult(CamelModel):
    feedback: InterviewFeedback
    next_question: InterviewQuestionContent | None = None
    is_complete: bool


class InterviewSummaryDetails(CamelModel):
    total_questions: int
    completed_questions: int
    average_score: float
    strengths: list[str]
    areas_for_improvement: list[str]
    recommendations: list[str]


class MockInterviewSummary(CamelModel):
    overall_score: float
    summary: InterviewSummaryDetails

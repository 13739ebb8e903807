"""Question schemas."""

from decimal import Decimal
from typing import Literal

from pydantic import Field

from techprep.schemas.common import CamelModel, Difficulty, Pagination, QuestionType, UTCDateTime

SortBy = Literal["title", "difficulty", "rating", "createdAt"]
SortOrder = Literal["asc", "desc"]


class CodeExample(CamelModel):
    language: str
    code: str
    explanation: str | None = None


class Solution(CamelModel):
    explanation: str
    code_examples: list[CodeExample] = []
    time_complexity: str
    space_complexity: str
    alternative_approaches: list[str] = []


class QuestionFilters(CamelModel):
    """Search criteria. List filters match when any value matches."""

    search: str | None = None
    technologies: list[str] = []
    difficulty: list[Difficulty] = []
    roles: list[str] = []
    companies: list[str] = []
    type: list[QuestionType] = []
    tags: list[str] = []
    page: int = 1
    limit: int = 20
    sort_by: SortBy = "createdAt"
    sort_order: SortOrder = "desc"


class QuestionSummary(CamelModel):
    id: str
    title: str
    type: QuestionType
    difficulty: Difficulty
    technologies: list[str] = []
    roles: list[str] = []
    companies: list[str] = []
    tags: list[str] = []
    rating: Decimal = Decimal("0")
    rating_count: int = 0
    created_at: UTCDateTime


class QuestionDetail(QuestionSummary):
    content: str
    solution: Solution | None = None
    submitted_by: str | None = None
    is_approved: bool = False
    updated_at: UTCDateTime


class FilterOptions(CamelModel):
    available_technologies: list[str] = []
    available_roles: list[str] = []
    available_companies: list[str] = []
    available_tags: list[str] = []


class QuestionSearchResult(CamelModel):
    questions: list[QuestionSummary]
    pagination: Pagination
    filters: FilterOptions


class QuestionCreate(CamelModel):
    title: str = Field(min_length=1, max_length=300)
    content: str = Field(min_length=1)
    type: QuestionType
    difficulty: Difficulty
    technologies: list[str] = []
    roles: list[str] = []
    companies: list[str] = []
    tags: list[str] = []
    solution: Solution | None = None
    is_approved: bool = False


class QuestionUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1, max_length=300)
    content: str | None = Field(default=None, min_length=1)
    type: QuestionType | None = None
    difficulty: Difficulty | None = None
    technologies: list[str] | None = None
    roles: list[str] | None = None
    companies: list[str] | None = None
    tags: list[str] | None = None
    solution: Solution | None = None

"""Enumerations shared by the ORM models and the API schemas."""

from enum import Enum as PyEnum

from sqlalchemy import Enum as SQLEnum


class Level(str, PyEnum):
    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"


class Difficulty(str, PyEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class QuestionType(str, PyEnum):
    CODING = "coding"
    CONCEPTUAL = "conceptual"
    SYSTEM_DESIGN = "system-design"
    BEHAVIORAL = "behavioral"


class InterviewStatus(str, PyEnum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class ResourceType(str, PyEnum):
    ARTICLE = "article"
    VIDEO = "video"
    DOCUMENTATION = "documentation"
    TUTORIAL = "tutorial"


class ContentType(str, PyEnum):
    QUESTION = "question"
    ROADMAP = "roadmap"
    ROLE = "role"


def enum_column(enum_cls: type[PyEnum], name: str) -> SQLEnum:
    """Non-native enum column storing member values ("system-design", not "SYSTEM_DESIGN")."""
    return SQLEnum(
        enum_cls,
        name=name,
        native_enum=False,
        length=20,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )

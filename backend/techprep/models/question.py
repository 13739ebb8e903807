"""Interview question model."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, Boolean, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from techprep.core.database import Base, utcnow
from techprep.models.enums import Difficulty, QuestionType, enum_column


class Question(Base):
    """Question bank entry. Only approved questions are visible to the public API."""

    __tablename__ = "questions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    title: Mapped[str] = mapped_column(String(300))
    content: Mapped[str] = mapped_column(Text)
    type: Mapped[QuestionType] = mapped_column(enum_column(QuestionType, "question_type"))
    difficulty: Mapped[Difficulty] = mapped_column(enum_column(Difficulty, "difficulty"), index=True)

    # Classification
    technologies: Mapped[list[str]] = mapped_column(JSON, default=list)
    roles: Mapped[list[str]] = mapped_column(JSON, default=list)
    companies: Mapped[list[str]] = mapped_column(JSON, default=list)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list)

    # {"explanation", "codeExamples", "timeComplexity", "spaceComplexity", "alternativeApproaches"}
    solution: Mapped[dict[str, Any] | None] = mapped_column(JSON)

    rating: Mapped[Decimal] = mapped_column(Numeric(3, 2), default=Decimal("0"))
    rating_count: Mapped[int] = mapped_column(Integer, default=0)
    submitted_by: Mapped[str | None] = mapped_column(String(100))
    is_approved: Mapped[bool] = mapped_column(Boolean, default=False, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

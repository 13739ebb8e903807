"""Mock interview session models."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from techprep.core.database import Base, utcnow
from techprep.models.enums import InterviewStatus, Level, enum_column


class MockInterview(Base):
    """A timed interview session.

    Status only ever moves active -> completed or active -> abandoned.
    """

    __tablename__ = "mock_interviews"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    role_id: Mapped[str] = mapped_column(ForeignKey("roles.id"), index=True)
    level: Mapped[Level] = mapped_column(enum_column(Level, "level"))
    status: Mapped[InterviewStatus] = mapped_column(
        enum_column(InterviewStatus, "interview_status"), default=InterviewStatus.ACTIVE, index=True
    )

    start_time: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    end_time: Mapped[datetime | None] = mapped_column(DateTime)
    duration: Mapped[int | None] = mapped_column(Integer)  # minutes

    total_questions: Mapped[int] = mapped_column(Integer, default=0)
    completed_questions: Mapped[int] = mapped_column(Integer, default=0)
    overall_score: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))

    role = relationship("Role")
    interview_questions = relationship(
        "InterviewQuestion",
        back_populates="mock_interview",
        order_by="InterviewQuestion.order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


class InterviewQuestion(Base):
    """One question slot of a mock interview, with the candidate's answer once submitted."""

    __tablename__ = "interview_questions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    mock_interview_id: Mapped[str] = mapped_column(
        ForeignKey("mock_interviews.id", ondelete="CASCADE"), index=True
    )
    question_id: Mapped[str] = mapped_column(ForeignKey("questions.id"))
    order: Mapped[int] = mapped_column(Integer)
    time_limit: Mapped[int] = mapped_column(Integer, default=30)  # minutes

    # Answer
    user_code: Mapped[str | None] = mapped_column(Text)
    feedback: Mapped[dict[str, Any] | None] = mapped_column(JSON)
    score: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    completed_at: Mapped[datetime | None] = mapped_column(DateTime)

    mock_interview = relationship("MockInterview", back_populates="interview_questions")
    question = relationship("Question")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

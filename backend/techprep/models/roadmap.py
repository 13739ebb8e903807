"""Roadmap, topic and topic/question link models."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from techprep.core.database import Base, utcnow
from techprep.models.enums import Level, enum_column


class Roadmap(Base):
    """Learning path for one role at one level."""

    __tablename__ = "roadmaps"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    role_id: Mapped[str] = mapped_column(ForeignKey("roles.id", ondelete="CASCADE"), index=True)
    level: Mapped[Level] = mapped_column(enum_column(Level, "level"))

    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str | None] = mapped_column(Text)
    estimated_hours: Mapped[int] = mapped_column(Integer, default=0)
    prerequisites: Mapped[list[str]] = mapped_column(JSON, default=list)

    role = relationship("Role", back_populates="roadmaps")
    topics = relationship(
        "Topic",
        back_populates="roadmap",
        order_by="Topic.order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


class Topic(Base):
    """Ordered step of a roadmap."""

    __tablename__ = "topics"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    roadmap_id: Mapped[str] = mapped_column(ForeignKey("roadmaps.id", ondelete="CASCADE"), index=True)

    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str | None] = mapped_column(Text)
    order: Mapped[int] = mapped_column(Integer, default=0)
    # [{"title", "url", "type"}]
    resources: Mapped[list[dict[str, str]]] = mapped_column(JSON, default=list)

    roadmap = relationship("Roadmap", back_populates="topics")
    topic_questions = relationship(
        "TopicQuestion", back_populates="topic", cascade="all, delete-orphan", passive_deletes=True
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


class TopicQuestion(Base):
    __tablename__ = "topic_questions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    topic_id: Mapped[str] = mapped_column(ForeignKey("topics.id", ondelete="CASCADE"), index=True)
    question_id: Mapped[str] = mapped_column(ForeignKey("questions.id", ondelete="CASCADE"), index=True)

    topic = relationship("Topic", back_populates="topic_questions")
    question = relationship("Question")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

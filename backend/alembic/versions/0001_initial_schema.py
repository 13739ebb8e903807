"""Initial schema: roles, roadmaps, topics, questions, mock interviews

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _enum(name: str, *values: str) -> sa.Enum:
    return sa.Enum(*values, name=name, native_enum=False, length=20)


LEVEL = ("junior", "mid", "senior")


def _timestamps(updated: bool = True) -> list[sa.Column]:
    columns = [sa.Column("created_at", sa.DateTime(), nullable=False)]
    if updated:
        columns.append(sa.Column("updated_at", sa.DateTime(), nullable=False))
    return columns


def upgrade() -> None:
    op.create_table(
        "roles",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("technologies", sa.JSON(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "roadmaps",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("role_id", sa.String(36), sa.ForeignKey("roles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("level", _enum("level", *LEVEL), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("estimated_hours", sa.Integer(), nullable=False),
        sa.Column("prerequisites", sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_roadmaps_role_id", "roadmaps", ["role_id"])

    op.create_table(
        "topics",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("roadmap_id", sa.String(36), sa.ForeignKey("roadmaps.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("resources", sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_topics_roadmap_id", "topics", ["roadmap_id"])

    op.create_table(
        "questions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "type",
            _enum("question_type", "coding", "conceptual", "system-design", "behavioral"),
            nullable=False,
        ),
        sa.Column("difficulty", _enum("difficulty", "easy", "medium", "hard"), nullable=False),
        sa.Column("technologies", sa.JSON(), nullable=False),
        sa.Column("roles", sa.JSON(), nullable=False),
        sa.Column("companies", sa.JSON(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("solution", sa.JSON(), nullable=True),
        sa.Column("rating", sa.Numeric(3, 2), nullable=False),
        sa.Column("rating_count", sa.Integer(), nullable=False),
        sa.Column("submitted_by", sa.String(100), nullable=True),
        sa.Column("is_approved", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_questions_difficulty", "questions", ["difficulty"])
    op.create_index("ix_questions_is_approved", "questions", ["is_approved"])

    op.create_table(
        "topic_questions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("topic_id", sa.String(36), sa.ForeignKey("topics.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "question_id", sa.String(36), sa.ForeignKey("questions.id", ondelete="CASCADE"), nullable=False
        ),
        *_timestamps(updated=False),
    )
    op.create_index("ix_topic_questions_topic_id", "topic_questions", ["topic_id"])
    op.create_index("ix_topic_questions_question_id", "topic_questions", ["question_id"])

    op.create_table(
        "mock_interviews",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("role_id", sa.String(36), sa.ForeignKey("roles.id"), nullable=False),
        sa.Column("level", _enum("level", *LEVEL), nullable=False),
        sa.Column(
            "status", _enum("interview_status", "active", "completed", "abandoned"), nullable=False
        ),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("end_time", sa.DateTime(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("total_questions", sa.Integer(), nullable=False),
        sa.Column("completed_questions", sa.Integer(), nullable=False),
        sa.Column("overall_score", sa.Numeric(5, 2), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_mock_interviews_role_id", "mock_interviews", ["role_id"])
    op.create_index("ix_mock_interviews_status", "mock_interviews", ["status"])

    op.create_table(
        "interview_questions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "mock_interview_id",
            sa.String(36),
            sa.ForeignKey("mock_interviews.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("question_id", sa.String(36), sa.ForeignKey("questions.id"), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("time_limit", sa.Integer(), nullable=False),
        sa.Column("user_code", sa.Text(), nullable=True),
        sa.Column("feedback", sa.JSON(), nullable=True),
        sa.Column("score", sa.Numeric(5, 2), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index("ix_interview_questions_mock_interview_id", "interview_questions", ["mock_interview_id"])


def downgrade() -> None:
    op.drop_table("interview_questions")
    op.drop_table("mock_interviews")
    op.drop_table("topic_questions")
    op.drop_table("questions")
    op.drop_table("topics")
    op.drop_table("roadmaps")
    op.drop_table("roles")

"""Database models."""

from techprep.models.enums import (
    ContentType,
    Difficulty,
    InterviewStatus,
    Level,
    QuestionType,
    ResourceType,
)
from techprep.models.mock_interview import InterviewQuestion, MockInterview
from techprep.models.question import Question
from techprep.models.roadmap import Roadmap, Topic, TopicQuestion
from techprep.models.role import Role

__all__ = [
    "Role",
    "Roadmap",
    "Topic",
    "TopicQuestion",
    "Question",
    "MockInterview",
    "InterviewQuestion",
    "Level",
    "Difficulty",
    "QuestionType",
    "InterviewStatus",
    "ResourceType",
    "ContentType",
]

"""Service layer modules."""

from techprep.services import (
    admin_service,
    mock_interview_service,
    question_service,
    roadmap_service,
)

__all__ = [
    "admin_service",
    "mock_interview_service",
    "question_service",
    "roadmap_service",
]

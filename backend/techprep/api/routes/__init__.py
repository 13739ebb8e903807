"""API routes."""

from techprep.api.routes import admin, health, mock_interviews, questions, roadmaps, status

__all__ = ["admin", "health", "mock_interviews", "questions", "roadmaps", "status"]

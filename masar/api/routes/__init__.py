"""API routes."""

from masar.api.routes import career_roadmaps, courses, tasks, topics, users

__all__ = ["career_roadmaps", "courses", "tasks", "topics", "users"]

"""Roadmap schemas for API requests and responses."""

from datetime import datetime
from typing import Any

from pydantic import Field

from masar.schemas.base import CamelModel
from masar.schemas.course import CourseResponse
from masar.schemas.topic import TopicResponse


class CareerRoadmapCreate(CamelModel):
    """Request an AI-generated roadmap for a user."""

    user_id: int
    roadmap_role: str = Field(min_length=1)


class RoadmapUpdate(CamelModel):
    """Update an existing roadmap (user edits)."""

    roadmap_role: str | None = Field(default=None, min_length=1)
    roadmap_details: dict[str, Any] | None = None


class RoadmapResponse(CamelModel):
    """Roadmap with its live topics, tasks and courses."""

    id: int
    user_id: int
    roadmap_role: str
    roadmap_details: dict[str, Any]
    topics: list[TopicResponse] = []
    courses: list[CourseResponse] = []
    created_at: datetime
    updated_at: datetime


class RoadmapDeleteResponse(CamelModel):
    message: str
    deleted_roadmap_id: int


class TopicProgress(CamelModel):
    """Progress data for a single topic."""

    id: int
    title: str
    status: str  # "locked" | "active" | "completed"
    progress: float  # 0.0 to 1.0
    completed_tasks: int
    total_tasks: int


class RoadmapProgress(CamelModel):
    """Progress data for a roadmap."""

    roadmap_id: int
    roadmap_role: str
    overall_progress: float  # 0.0 to 1.0
    completed_tasks: int
    total_tasks: int
    topics: list[TopicProgress]

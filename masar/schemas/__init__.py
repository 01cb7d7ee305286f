"""Pydantic schemas."""

from masar.schemas.course import CourseDeleteResponse, CourseResponse, CourseUpdate
from masar.schemas.roadmap import (
    CareerRoadmapCreate,
    RoadmapDeleteResponse,
    RoadmapProgress,
    RoadmapResponse,
    RoadmapUpdate,
    TopicProgress,
)
from masar.schemas.topic import (
    TaskCreate,
    TaskResponse,
    TaskUpdate,
    TaskUpsert,
    TopicCreate,
    TopicDeleteResponse,
    TopicResponse,
    TopicUpdate,
)

__all__ = [
    "CareerRoadmapCreate",
    "RoadmapUpdate",
    "RoadmapResponse",
    "RoadmapDeleteResponse",
    "RoadmapProgress",
    "TopicProgress",
    "TopicCreate",
    "TopicUpdate",
    "TopicResponse",
    "TopicDeleteResponse",
    "TaskCreate",
    "TaskUpsert",
    "TaskUpdate",
    "TaskResponse",
    "CourseUpdate",
    "CourseResponse",
    "CourseDeleteResponse",
]

"""Database models."""

from masar.models.roadmap import Course, Roadmap, RoadmapTopic, Task
from masar.models.user import User, UserSkill

__all__ = [
    "User",
    "UserSkill",
    "Roadmap",
    "RoadmapTopic",
    "Task",
    "Course",
]

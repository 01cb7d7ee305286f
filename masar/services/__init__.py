"""Service layer modules."""

from masar.services import (
    course_service,
    job_market,
    roadmap_service,
    task_service,
    topic_service,
)

__all__ = [
    "course_service",
    "job_market",
    "roadmap_service",
    "task_service",
    "topic_service",
]

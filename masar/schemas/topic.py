"""Topic and task schemas."""

from datetime import datetime

from pydantic import Field

from masar.schemas.base import CamelModel


class TaskCreate(CamelModel):
    title: str = Field(min_length=1)
    description: str = ""
    order: int | None = None
    is_completed: bool = False


class TaskUpsert(TaskCreate):
    """Task in a topic update; rows without a known ``id`` are created."""

    id: int | None = None


class TaskUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    order: int | None = None
    is_completed: bool | None = None


class TaskResponse(CamelModel):
    id: int
    topic_id: int
    title: str
    description: str
    order: int
    is_completed: bool


class TopicCreate(CamelModel):
    """Manually add a topic to a roadmap."""

    roadmap_id: int
    title: str = Field(min_length=1)
    description: str | None = None
    order: int = 0
    total_tasks: int | None = None
    tasks: list[TaskCreate] = []


class TopicUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    order: int | None = None
    total_tasks: int | None = None
    tasks: list[TaskUpsert] | None = None


class TopicResponse(CamelModel):
    id: int
    roadmap_id: int
    title: str
    description: str | None
    order: int
    total_tasks: int
    completed_tasks: int
    tasks: list[TaskResponse] = []
    created_at: datetime
    updated_at: datetime


class TopicDeleteResponse(CamelModel):
    message: str

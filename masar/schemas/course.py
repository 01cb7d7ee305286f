"""Course schemas."""

from datetime import datetime

from pydantic import Field

from masar.schemas.base import CamelModel


class CourseUpdate(CamelModel):
    """Replace a course's metadata; title and link are mandatory."""

    title: str = Field(min_length=1)
    course_link: str = Field(min_length=1)
    description: str | None = None
    instructors: str | None = None


class CourseResponse(CamelModel):
    id: int
    roadmap_id: int
    title: str
    description: str | None
    instructors: str | None
    course_link: str
    created_at: datetime
    updated_at: datetime


class CourseDeleteResponse(CamelModel):
    message: str
    deleted_course_id: int

"""Course routes."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from masar.api.deps import DBSession
from masar.models import Course
from masar.schemas import CourseDeleteResponse, CourseResponse, CourseUpdate
from masar.services import course_service

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("", response_model=list[CourseResponse])
async def list_courses(
    db: DBSession,
    roadmap_id: Annotated[int | None, Query(alias="roadmapId")] = None,
) -> list[Course]:
    """List live courses."""
    return await course_service.list_courses(db, roadmap_id)


@router.get("/{course_id}", response_model=CourseResponse)
async def get_course(course_id: int, db: DBSession) -> Course:
    """Get course details."""
    course = await course_service.get_course(db, course_id)
    if not course:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )
    return course


@router.post("/{course_id}", response_model=CourseResponse)
async def update_course(course_id: int, data: CourseUpdate, db: DBSession) -> Course:
    """Update course metadata."""
    course = await course_service.update_course(db, course_id, data)
    if not course:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )
    return course


@router.delete("/{course_id}", response_model=CourseDeleteResponse)
async def delete_course(course_id: int, db: DBSession) -> dict:
    """Soft delete a course."""
    course = await course_service.soft_delete_course(db, course_id)
    if not course:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )
    return {"message": "Course deleted successfully", "deleted_course_id": course.id}

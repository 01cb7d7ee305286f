"""Course persistence: AI-recommended courses and course maintenance."""

from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from masar.ai.content_client import fetch_roadmap_content
from masar.ai.llm_utils import GeneratedRoadmap, parse_roadmap_response
from masar.core.database import get_db_session, insert_unless_duplicate
from masar.core.logging import get_logger
from masar.models.roadmap import Course, Roadmap
from masar.schemas.course import CourseUpdate

logger = get_logger(__name__)


async def save_courses(
    db: AsyncSession,
    roadmap_id: int,
    courses: list[dict[str, Any]],
) -> list[Course]:
    """Persist generated courses in the caller's transaction.

    The full courses array always replaces ``roadmap_details["courses"]``.
    A course whose link is already recorded for the roadmap is skipped;
    existing rows are never updated.

    Returns:
        The newly inserted courses, in input order
    """
    roadmap = await db.get(Roadmap, roadmap_id)
    if roadmap is None:
        raise ValueError(f"Roadmap {roadmap_id} not found")

    details = dict(roadmap.roadmap_details) if isinstance(roadmap.roadmap_details, dict) else {}
    details["courses"] = courses
    roadmap.roadmap_details = details
    await db.flush()

    created: list[Course] = []
    skipped = 0
    for data in courses:
        link = data.get("courseLink") if isinstance(data, dict) else None
        if not link:
            logger.warning("Skipping generated course without link", roadmap_id=roadmap_id)
            skipped += 1
            continue

        course = Course(
            roadmap_id=roadmap_id,
            title=data.get("title") or link,
            description=data.get("description"),
            instructors=data.get("instructors"),
            course_link=link,
        )
        if await insert_unless_duplicate(db, course):
            created.append(course)
        else:
            skipped += 1

    logger.info(
        "Generated courses saved",
        roadmap_id=roadmap_id,
        created=len(created),
        skipped=skipped,
    )
    return created


async def generate_and_save_courses(
    roadmap_id: int,
    role_label: str,
    *,
    content: GeneratedRoadmap | None = None,
) -> list[Course]:
    """Persist AI-recommended courses for a roadmap in a transaction of its own.

    Without ``content`` the model is queried for ``role_label`` first.
    """
    if content is None:
        content = parse_roadmap_response(await fetch_roadmap_content(role_label))

    async with get_db_session() as db:
        return await save_courses(db, roadmap_id, content.courses)


async def get_course(db: AsyncSession, course_id: int) -> Course | None:
    """Get a live course by ID."""
    result = await db.execute(
        select(Course).where(Course.id == course_id, Course.deleted_at.is_(None))
    )
    return result.scalar_one_or_none()


async def list_courses(db: AsyncSession, roadmap_id: int | None = None) -> list[Course]:
    """List live courses, optionally limited to one roadmap."""
    stmt = select(Course).where(Course.deleted_at.is_(None)).order_by(Course.id)
    if roadmap_id is not None:
        stmt = stmt.where(Course.roadmap_id == roadmap_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def update_course(
    db: AsyncSession,
    course_id: int,
    data: CourseUpdate,
) -> Course | None:
    """Replace a course's metadata.

    Note: This function commits the transaction. A link that collides with
    another course of the same roadmap raises IntegrityError.
    """
    course = await get_course(db, course_id)
    if course is None:
        return None

    course.title = data.title
    course.course_link = data.course_link
    course.description = data.description
    course.instructors = data.instructors
    await db.commit()
    await db.refresh(course)

    logger.info("Course updated", course_id=course_id)
    return course


async def soft_delete_course(db: AsyncSession, course_id: int) -> Course | None:
    """Mark a course deleted.

    Note: This function commits the transaction.
    """
    course = await get_course(db, course_id)
    if course is None:
        return None
    course.deleted_at = datetime.utcnow()
    await db.commit()
    logger.info("Course deleted", course_id=course_id)
    return course

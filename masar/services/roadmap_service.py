"""Roadmap service: AI generation orchestration, CRUD and progress tracking."""

import asyncio
from datetime import datetime
from typing import Any

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from masar.ai.content_client import fetch_roadmap_content
from masar.ai.llm_utils import parse_roadmap_response
from masar.core.database import get_db_session
from masar.core.errors import RoadmapExistsError, RoadmapGenerationError, UserNotFoundError
from masar.core.logging import get_logger
from masar.models.roadmap import Course, Roadmap, RoadmapTopic, Task
from masar.models.user import User
from masar.schemas.roadmap import RoadmapUpdate
from masar.services import course_service, job_market, topic_service

logger = get_logger(__name__)


# ============================================================================
# Generation
# ============================================================================


async def _create_shell(user_id: int, role_label: str) -> tuple[int, list[tuple[str, int | None]]]:
    """Validate the user and commit an empty roadmap for them.

    Returns:
        The shell roadmap ID and the user's skills as (name, level) pairs
    """
    async with get_db_session() as db:
        result = await db.execute(
            select(User).where(User.id == user_id).options(selectinload(User.skills))
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise UserNotFoundError(user_id)

        if await get_user_roadmap(db, user_id) is not None:
            raise RoadmapExistsError(user_id)

        roadmap = Roadmap(
            user_id=user_id,
            roadmap_role=role_label,
            roadmap_details={"topics": [], "courses": []},
        )
        db.add(roadmap)
        try:
            await db.flush()
        except IntegrityError as exc:
            # Lost a race with a concurrent request for the same user
            raise RoadmapExistsError(user_id) from exc

        skills = [(skill.name, skill.level) for skill in user.skills]
        return roadmap.id, skills


async def discard_roadmap(roadmap_id: int) -> None:
    """Hard-delete a roadmap and every row hanging off it.

    Children go first (tasks, topics, courses) so nothing is orphaned
    whether or not the database cascades.
    """
    async with get_db_session() as db:
        topic_ids = select(RoadmapTopic.id).where(RoadmapTopic.roadmap_id == roadmap_id)
        await db.execute(delete(Task).where(Task.topic_id.in_(topic_ids)))
        await db.execute(delete(RoadmapTopic).where(RoadmapTopic.roadmap_id == roadmap_id))
        await db.execute(delete(Course).where(Course.roadmap_id == roadmap_id))
        await db.execute(delete(Roadmap).where(Roadmap.id == roadmap_id))
    logger.info("Roadmap discarded", roadmap_id=roadmap_id)


async def _populate(roadmap_id: int, role_label: str, skills: list[tuple[str, int | None]]) -> None:
    """Fetch content once and run both writers concurrently.

    Both writers always run to completion before this returns or raises, so
    no write can land after a compensating delete.
    """
    postings = await job_market.fetch_job_postings(role_label)
    raw = await fetch_roadmap_content(role_label, skills=skills, job_postings=postings)
    content = parse_roadmap_response(raw)

    results = await asyncio.gather(
        topic_service.generate_and_save_topics(roadmap_id, role_label, content=content),
        course_service.generate_and_save_courses(roadmap_id, role_label, content=content),
        return_exceptions=True,
    )
    errors = [r for r in results if isinstance(r, BaseException)]
    for error in errors[1:]:
        logger.error("Roadmap writer failed", roadmap_id=roadmap_id, error=repr(error))
    if errors:
        raise errors[0]


async def create_career_roadmap(user_id: int, role_label: str) -> Roadmap:
    """Create a user's roadmap and fill it with AI-generated content.

    Raises:
        UserNotFoundError: The user does not exist
        RoadmapExistsError: The user already has a live roadmap
        RoadmapGenerationError: Content generation or persistence failed;
            the roadmap and any partial content have been deleted
    """
    roadmap_id, skills = await _create_shell(user_id, role_label)

    with structlog.contextvars.bound_contextvars(roadmap_id=roadmap_id, user_id=user_id):
        logger.info("Roadmap shell created", role=role_label)
        try:
            await _populate(roadmap_id, role_label, skills)
        except Exception as exc:
            logger.error("Roadmap generation failed", error=str(exc), exc_info=True)
            await discard_roadmap(roadmap_id)
            raise RoadmapGenerationError(roadmap_id, role_label) from exc

        async with get_db_session() as db:
            roadmap = await get_roadmap(db, roadmap_id)
        if roadmap is None:
            raise RoadmapGenerationError(roadmap_id, role_label)

        logger.info(
            "Roadmap generated",
            topics=len(roadmap.topics),
            courses=len(roadmap.courses),
        )
        return roadmap


# ============================================================================
# CRUD Operations
# ============================================================================


def _roadmap_query():
    """Live roadmaps with live topics (and their tasks) and live courses."""
    return (
        select(Roadmap)
        .where(Roadmap.deleted_at.is_(None))
        .options(
            selectinload(Roadmap.topics.and_(RoadmapTopic.deleted_at.is_(None))).selectinload(
                RoadmapTopic.tasks
            ),
            selectinload(Roadmap.courses.and_(Course.deleted_at.is_(None))),
        )
        .execution_options(populate_existing=True)
    )


async def get_roadmap(db: AsyncSession, roadmap_id: int) -> Roadmap | None:
    """Get a live roadmap by ID, fully loaded."""
    result = await db.execute(_roadmap_query().where(Roadmap.id == roadmap_id))
    return result.scalar_one_or_none()


async def get_user_roadmap(db: AsyncSession, user_id: int) -> Roadmap | None:
    """Get the user's live roadmap, if any."""
    result = await db.execute(_roadmap_query().where(Roadmap.user_id == user_id))
    return result.scalars().first()


async def list_roadmaps(db: AsyncSession, user_id: int | None = None) -> list[Roadmap]:
    """List live roadmaps, optionally for a single user."""
    stmt = _roadmap_query().order_by(Roadmap.id)
    if user_id is not None:
        stmt = stmt.where(Roadmap.user_id == user_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def list_user_roadmaps(db: AsyncSession, user_id: int) -> list[Roadmap]:
    return await list_roadmaps(db, user_id=user_id)


async def update_roadmap(
    db: AsyncSession,
    roadmap_id: int,
    update_data: RoadmapUpdate,
) -> Roadmap | None:
    """Update a roadmap (user edits).

    Note: This function commits the transaction.
    """
    roadmap = await get_roadmap(db, roadmap_id)
    if not roadmap:
        return None

    if update_data.roadmap_role is not None:
        roadmap.roadmap_role = update_data.roadmap_role
    if update_data.roadmap_details is not None:
        roadmap.roadmap_details = update_data.roadmap_details

    await db.commit()
    logger.info("Roadmap updated", roadmap_id=roadmap_id)
    return await get_roadmap(db, roadmap_id)


async def soft_delete_roadmap(db: AsyncSession, roadmap_id: int) -> Roadmap | None:
    """Mark a roadmap deleted, freeing the user to generate a new one.

    Note: This function commits the transaction.
    """
    roadmap = await db.get(Roadmap, roadmap_id)
    if roadmap is None or roadmap.deleted_at is not None:
        return None

    roadmap.deleted_at = datetime.utcnow()
    await db.commit()
    logger.info("Roadmap deleted", roadmap_id=roadmap_id)
    return roadmap


# ============================================================================
# Progress Calculation
# ============================================================================


def calc_topic_progress(topic: RoadmapTopic) -> float:
    """Share of the topic's tasks completed (0.0 to 1.0)."""
    if topic.total_tasks <= 0:
        return 0.0
    return min(topic.completed_tasks / topic.total_tasks, 1.0)


def calc_topic_status(progress: float) -> str:
    """Returns: "locked" | "active" | "completed"."""
    if progress >= 1.0:
        return "completed"
    elif progress > 0:
        return "active"
    else:
        return "locked"


def get_roadmap_progress(roadmap: Roadmap) -> dict[str, Any]:
    """Calculate progress for every live topic of a loaded roadmap.

    Overall progress is the mean of the topic progress values.
    """
    topics_data = []
    total_progress = 0.0
    for topic in roadmap.topics:
        progress = calc_topic_progress(topic)
        topics_data.append(
            {
                "id": topic.id,
                "title": topic.title,
                "status": calc_topic_status(progress),
                "progress": progress,
                "completed_tasks": topic.completed_tasks,
                "total_tasks": topic.total_tasks,
            }
        )
        total_progress += progress

    num_topics = len(roadmap.topics)
    return {
        "roadmap_id": roadmap.id,
        "roadmap_role": roadmap.roadmap_role,
        "overall_progress": total_progress / num_topics if num_topics > 0 else 0.0,
        "completed_tasks": sum(t.completed_tasks for t in roadmap.topics),
        "total_tasks": sum(t.total_tasks for t in roadmap.topics),
        "topics": topics_data,
    }

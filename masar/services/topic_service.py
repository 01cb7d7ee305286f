"""Topic and task persistence: AI-generated topics and manual topic CRUD."""

from datetime import datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from masar.ai.content_client import fetch_roadmap_content
from masar.ai.llm_utils import GeneratedRoadmap, parse_roadmap_response
from masar.core.database import get_db_session, insert_unless_duplicate
from masar.core.logging import get_logger
from masar.models.roadmap import Roadmap, RoadmapTopic, Task
from masar.schemas.topic import TaskCreate, TopicCreate, TopicUpdate

logger = get_logger(__name__)


def _task_rows(topic_id: int, tasks: list[Any]) -> list[Task]:
    rows = []
    for index, task in enumerate(tasks):
        if not isinstance(task, dict):
            task = {"title": str(task)}
        rows.append(
            Task(
                topic_id=topic_id,
                title=task.get("title") or "",
                description=task.get("description") or "",
                order=index + 1,
                is_completed=False,
            )
        )
    return rows


# ============================================================================
# Generated Topics
# ============================================================================


async def save_topics(
    db: AsyncSession,
    roadmap_id: int,
    topics: list[dict[str, Any]],
) -> list[RoadmapTopic]:
    """Persist generated topics and their tasks in the caller's transaction.

    The full topics array always replaces ``roadmap_details["topics"]``.
    Topics whose title already exists in the roadmap are skipped; tasks are
    only created for topics inserted by this call.

    Returns:
        The newly inserted topics, in input order
    """
    roadmap = await db.get(Roadmap, roadmap_id)
    if roadmap is None:
        raise ValueError(f"Roadmap {roadmap_id} not found")

    details = dict(roadmap.roadmap_details) if isinstance(roadmap.roadmap_details, dict) else {}
    details["topics"] = topics
    roadmap.roadmap_details = details
    await db.flush()

    created: list[tuple[RoadmapTopic, list[Any]]] = []
    skipped = 0
    for index, data in enumerate(topics):
        title = data.get("title") if isinstance(data, dict) else None
        if not title:
            logger.warning("Skipping generated topic without title", roadmap_id=roadmap_id)
            skipped += 1
            continue

        tasks = data.get("tasks")
        if not isinstance(tasks, list):
            tasks = []
        topic = RoadmapTopic(
            roadmap_id=roadmap_id,
            title=title,
            description=data.get("description"),
            order=index + 1,
            total_tasks=len(tasks),
            completed_tasks=0,
        )
        if await insert_unless_duplicate(db, topic):
            created.append((topic, tasks))
        else:
            skipped += 1

    for topic, tasks in created:
        db.add_all(_task_rows(topic.id, tasks))
    await db.flush()

    logger.info(
        "Generated topics saved",
        roadmap_id=roadmap_id,
        created=len(created),
        skipped=skipped,
    )
    return [topic for topic, _ in created]


async def generate_and_save_topics(
    roadmap_id: int,
    role_label: str,
    *,
    content: GeneratedRoadmap | None = None,
) -> list[RoadmapTopic]:
    """Persist AI-generated topics for a roadmap in a transaction of its own.

    Without ``content`` the model is queried for ``role_label`` first. Any
    error rolls the whole write back and propagates.
    """
    if content is None:
        content = parse_roadmap_response(await fetch_roadmap_content(role_label))

    async with get_db_session() as db:
        return await save_topics(db, roadmap_id, content.topics)


# ============================================================================
# CRUD Operations
# ============================================================================


def _topic_query():
    return (
        select(RoadmapTopic)
        .where(RoadmapTopic.deleted_at.is_(None))
        .options(selectinload(RoadmapTopic.tasks))
        .execution_options(populate_existing=True)
    )


async def get_topic(db: AsyncSession, topic_id: int) -> RoadmapTopic | None:
    """Get a live topic with its tasks."""
    result = await db.execute(_topic_query().where(RoadmapTopic.id == topic_id))
    return result.scalar_one_or_none()


async def list_topics(db: AsyncSession, roadmap_id: int | None = None) -> list[RoadmapTopic]:
    """List live topics, optionally limited to one roadmap."""
    stmt = _topic_query().order_by(
        RoadmapTopic.roadmap_id, RoadmapTopic.order, RoadmapTopic.id
    )
    if roadmap_id is not None:
        stmt = stmt.where(RoadmapTopic.roadmap_id == roadmap_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def sync_completed_tasks(db: AsyncSession, topic: RoadmapTopic) -> None:
    """Recount the topic's completed tasks from its task rows."""
    await db.flush()
    result = await db.execute(
        select(func.count(Task.id)).where(Task.topic_id == topic.id, Task.is_completed.is_(True))
    )
    topic.completed_tasks = result.scalar_one()


def _new_task(topic_id: int, data: TaskCreate, default_order: int) -> Task:
    return Task(
        topic_id=topic_id,
        title=data.title,
        description=data.description,
        order=data.order if data.order is not None else default_order,
        is_completed=data.is_completed,
    )


async def create_topic(db: AsyncSession, data: TopicCreate) -> RoadmapTopic | None:
    """Manually add a topic with its tasks.

    Returns:
        The created topic, or None if the roadmap does not exist

    Note: This function commits the transaction.
    """
    roadmap = await db.get(Roadmap, data.roadmap_id)
    if roadmap is None or roadmap.deleted_at is not None:
        return None

    topic = RoadmapTopic(
        roadmap_id=data.roadmap_id,
        title=data.title,
        description=data.description,
        order=data.order,
        total_tasks=data.total_tasks if data.total_tasks is not None else len(data.tasks),
        completed_tasks=sum(1 for t in data.tasks if t.is_completed),
    )
    db.add(topic)
    await db.flush()
    db.add_all(_new_task(topic.id, t, i + 1) for i, t in enumerate(data.tasks))
    await db.commit()

    logger.info("Topic created", topic_id=topic.id, roadmap_id=data.roadmap_id)
    return await get_topic(db, topic.id)


async def update_topic(
    db: AsyncSession,
    topic_id: int,
    data: TopicUpdate,
) -> RoadmapTopic | None:
    """Update a topic and upsert its tasks by id.

    Note: This function commits the transaction.
    """
    topic = await get_topic(db, topic_id)
    if topic is None:
        return None

    if data.title is not None:
        topic.title = data.title
    if data.description is not None:
        topic.description = data.description
    if data.order is not None:
        topic.order = data.order
    if data.total_tasks is not None:
        topic.total_tasks = data.total_tasks

    if data.tasks is not None:
        existing = {task.id: task for task in topic.tasks}
        next_order = len(existing) + 1
        for item in data.tasks:
            task = existing.get(item.id) if item.id is not None else None
            if task is None:
                db.add(_new_task(topic.id, item, next_order))
                next_order += 1
                continue
            task.title = item.title
            task.description = item.description
            task.is_completed = item.is_completed
            if item.order is not None:
                task.order = item.order
        await sync_completed_tasks(db, topic)

    await db.commit()
    logger.info("Topic updated", topic_id=topic_id)
    return await get_topic(db, topic_id)


async def soft_delete_topic(db: AsyncSession, topic_id: int) -> bool:
    """Mark a topic deleted.

    Note: This function commits the transaction.
    """
    topic = await get_topic(db, topic_id)
    if topic is None:
        return False
    topic.deleted_at = datetime.utcnow()
    await db.commit()
    logger.info("Topic deleted", topic_id=topic_id)
    return True

"""Task updates and topic completion counters."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from masar.core.logging import get_logger
from masar.models.roadmap import RoadmapTopic, Task
from masar.schemas.topic import TaskUpdate
from masar.services.topic_service import sync_completed_tasks

logger = get_logger(__name__)


async def get_task(db: AsyncSession, task_id: int) -> Task | None:
    """Get a task whose topic is still live."""
    result = await db.execute(
        select(Task)
        .join(RoadmapTopic, RoadmapTopic.id == Task.topic_id)
        .where(Task.id == task_id, RoadmapTopic.deleted_at.is_(None))
    )
    return result.scalar_one_or_none()


async def update_task(db: AsyncSession, task_id: int, data: TaskUpdate) -> Task | None:
    """Partially update a task, keeping the topic's completed count in step.

    Note: This function commits the transaction.
    """
    task = await get_task(db, task_id)
    if task is None:
        return None

    if data.title is not None:
        task.title = data.title
    if data.description is not None:
        task.description = data.description
    if data.order is not None:
        task.order = data.order

    if data.is_completed is not None and data.is_completed != task.is_completed:
        task.is_completed = data.is_completed
        topic = await db.get(RoadmapTopic, task.topic_id)
        if topic is not None:
            await sync_completed_tasks(db, topic)
        logger.info("Task completion changed", task_id=task_id, is_completed=data.is_completed)

    await db.commit()
    await db.refresh(task)
    return task

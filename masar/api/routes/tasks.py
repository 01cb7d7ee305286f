"""Task routes."""

from fastapi import APIRouter, HTTPException, status

from masar.api.deps import DBSession
from masar.models import Task
from masar.schemas import TaskResponse, TaskUpdate
from masar.services import task_service

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(task_id: int, data: TaskUpdate, db: DBSession) -> Task:
    """Partially update a task; completing it advances the topic's progress."""
    task = await task_service.update_task(db, task_id, data)
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found",
        )
    return task

"""Topic routes: manual topic and task management."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from masar.api.deps import DBSession
from masar.core.logging import get_logger
from masar.models import RoadmapTopic
from masar.schemas import TopicCreate, TopicDeleteResponse, TopicResponse, TopicUpdate
from masar.services import topic_service

logger = get_logger(__name__)
router = APIRouter(prefix="/topics", tags=["topics"])


@router.get("", response_model=list[TopicResponse])
async def list_topics(
    db: DBSession,
    roadmap_id: Annotated[int | None, Query(alias="roadmapId")] = None,
) -> list[RoadmapTopic]:
    """List live topics with their tasks."""
    return await topic_service.list_topics(db, roadmap_id)


@router.get("/{topic_id}", response_model=TopicResponse)
async def get_topic(topic_id: int, db: DBSession) -> RoadmapTopic:
    """Get a topic with its tasks ordered by position."""
    topic = await topic_service.get_topic(db, topic_id)
    if not topic:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Topic not found",
        )
    return topic


@router.post("", response_model=TopicResponse, status_code=status.HTTP_201_CREATED)
async def create_topic(data: TopicCreate, db: DBSession) -> RoadmapTopic:
    """Add a topic to a roadmap by hand."""
    topic = await topic_service.create_topic(db, data)
    if not topic:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Roadmap not found",
        )
    return topic


@router.put("/{topic_id}", response_model=TopicResponse)
async def update_topic(topic_id: int, data: TopicUpdate, db: DBSession) -> RoadmapTopic:
    """Update a topic and upsert its tasks."""
    topic = await topic_service.update_topic(db, topic_id, data)
    if not topic:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Topic not found",
        )
    return topic


@router.delete("/{topic_id}", response_model=TopicDeleteResponse)
async def delete_topic(topic_id: int, db: DBSession) -> dict:
    """Soft delete a topic."""
    if not await topic_service.soft_delete_topic(db, topic_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Topic not found",
        )
    return {"message": "Topic deleted successfully"}

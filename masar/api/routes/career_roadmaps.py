"""Career roadmap API routes."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from masar.api.deps import DBSession, RoadmapRateLimit
from masar.core.errors import RoadmapExistsError, RoadmapGenerationError, UserNotFoundError
from masar.core.logging import get_logger
from masar.models import Roadmap
from masar.schemas import (
    CareerRoadmapCreate,
    RoadmapDeleteResponse,
    RoadmapProgress,
    RoadmapResponse,
    RoadmapUpdate,
)
from masar.services import roadmap_service

logger = get_logger(__name__)
router = APIRouter(prefix="/career-roadmap", tags=["career-roadmap"])


@router.post(
    "",
    response_model=RoadmapResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[RoadmapRateLimit],
)
async def create_career_roadmap(data: CareerRoadmapCreate) -> Roadmap:
    """Create the user's roadmap and generate its topics, tasks and courses."""
    try:
        return await roadmap_service.create_career_roadmap(data.user_id, data.roadmap_role)
    except UserNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    except RoadmapExistsError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except RoadmapGenerationError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )


@router.get("", response_model=RoadmapResponse | list[RoadmapResponse])
async def get_career_roadmaps(
    db: DBSession,
    roadmap_id: Annotated[int | None, Query(alias="id")] = None,
) -> Roadmap | list[Roadmap]:
    """Get one roadmap with ``?id=``, or all live roadmaps."""
    if roadmap_id is None:
        return await roadmap_service.list_roadmaps(db)

    roadmap = await roadmap_service.get_roadmap(db, roadmap_id)
    if not roadmap:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Roadmap not found",
        )
    return roadmap


@router.put("/{roadmap_id}", response_model=RoadmapResponse)
async def update_career_roadmap(
    roadmap_id: int,
    data: RoadmapUpdate,
    db: DBSession,
) -> Roadmap:
    """Update a roadmap's role label or details."""
    roadmap = await roadmap_service.update_roadmap(db, roadmap_id, data)
    if not roadmap:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Roadmap not found",
        )
    return roadmap


@router.delete("/{roadmap_id}", response_model=RoadmapDeleteResponse)
async def delete_career_roadmap(roadmap_id: int, db: DBSession) -> dict:
    """Soft delete a roadmap."""
    roadmap = await roadmap_service.soft_delete_roadmap(db, roadmap_id)
    if not roadmap:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Roadmap not found",
        )
    return {
        "message": "Career roadmap deleted successfully",
        "deleted_roadmap_id": roadmap.id,
    }


@router.get("/{roadmap_id}/progress", response_model=RoadmapProgress)
async def get_career_roadmap_progress(roadmap_id: int, db: DBSession) -> dict:
    """Get overall and per-topic task completion for a roadmap."""
    roadmap = await roadmap_service.get_roadmap(db, roadmap_id)
    if not roadmap:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Roadmap not found",
        )
    return roadmap_service.get_roadmap_progress(roadmap)

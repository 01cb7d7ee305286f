"""User-scoped routes."""

from fastapi import APIRouter

from masar.api.deps import DBSession
from masar.models import Roadmap
from masar.schemas import RoadmapResponse
from masar.services import roadmap_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}/roadmaps", response_model=list[RoadmapResponse])
async def list_user_roadmaps(user_id: int, db: DBSession) -> list[Roadmap]:
    """List a user's live roadmaps (at most one)."""
    return await roadmap_service.list_user_roadmaps(db, user_id)

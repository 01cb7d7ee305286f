"""API dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from masar.core.database import get_db_session
from masar.core.ratelimit import limit_roadmap_generation


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with get_db_session() as session:
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db)]

# Rate limit for endpoints that call the LLM
RoadmapRateLimit = Depends(limit_roadmap_generation)

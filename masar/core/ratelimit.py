"""In-process sliding window rate limiting.

Hits are kept in a dict on the limiter instance, so limits only hold within a
single worker process.
"""

from datetime import datetime, timedelta

from fastapi import HTTPException, Request, status

from masar.core.config import get_settings
from masar.core.logging import get_logger

logger = get_logger(__name__)


class RateLimiter:
    def __init__(self, limit: int, window_seconds: int):
        self.limit = limit
        self.window = timedelta(seconds=window_seconds)
        self.hits: dict[str, list[datetime]] = {}

    def check(self, key: str) -> None:
        """Record a hit for ``key`` or raise 429 once the window is full."""
        now = datetime.utcnow()
        window_start = now - self.window
        entries = [ts for ts in self.hits.get(key, []) if ts >= window_start]

        if len(entries) >= self.limit:
            retry_after = int(max(1, (min(entries) + self.window - now).total_seconds()))
            logger.warning("Rate limit exceeded", key=key, retry_after=retry_after)
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail={
                    "message": "Rate limit exceeded",
                    "retry_after_seconds": retry_after,
                },
                headers={"Retry-After": str(retry_after)},
            )

        entries.append(now)
        self.hits[key] = entries

    def reset(self) -> None:
        self.hits.clear()


_settings = get_settings()
roadmap_rate_limiter = RateLimiter(
    limit=_settings.ROADMAP_RATE_LIMIT,
    window_seconds=_settings.ROADMAP_RATE_WINDOW_SECONDS,
)


def limit_roadmap_generation(request: Request) -> None:
    """FastAPI dependency guarding the AI-backed roadmap endpoint."""
    client = request.client.host if request.client else "anonymous"
    roadmap_rate_limiter.check(f"roadmap:{client}")

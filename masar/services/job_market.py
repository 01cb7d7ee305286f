"""Job market snapshots from the JSearch API, used as prompt context."""

from typing import Any

import httpx

from masar.core.config import get_settings
from masar.core.logging import get_logger

logger = get_logger(__name__)

_DESCRIPTION_CHARS = 400


def _summarize_posting(row: dict[str, Any]) -> dict[str, Any]:
    location = ", ".join(
        part for part in (row.get("job_city"), row.get("job_country")) if part
    )
    description = (row.get("job_description") or "").strip()
    return {
        "title": row.get("job_title"),
        "employer": row.get("employer_name"),
        "location": location or None,
        "employment_type": row.get("job_employment_type"),
        "description": description[:_DESCRIPTION_CHARS],
    }


async def fetch_job_postings(
    role_label: str,
    *,
    client: httpx.AsyncClient | None = None,
) -> list[dict[str, Any]]:
    """Return a small, trimmed sample of current postings for a role.

    Market data only enriches the prompt: with no API key configured, or when
    the request fails, an empty list is returned.
    """
    settings = get_settings()
    if not settings.JSEARCH_API_KEY:
        return []

    params = {
        "query": role_label.strip() or "software engineer",
        "page": "1",
        "num_pages": str(settings.JSEARCH_NUM_PAGES),
        "country": settings.JSEARCH_COUNTRY,
    }
    headers = {
        "x-rapidapi-key": settings.JSEARCH_API_KEY,
        "x-rapidapi-host": settings.JSEARCH_HOST,
    }
    url = f"{settings.JSEARCH_BASE_URL.rstrip('/')}/search"

    owns_client = client is None
    http = client or httpx.AsyncClient(timeout=20.0)
    try:
        response = await http.get(url, params=params, headers=headers)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Job market request failed", role=role_label, error=str(exc))
        return []
    finally:
        if owns_client:
            await http.aclose()

    records = data.get("data") if isinstance(data, dict) else None
    if not isinstance(records, list):
        logger.warning("Job market response has no postings list", role=role_label)
        return []

    rows = [row for row in records if isinstance(row, dict)]
    postings = [_summarize_posting(row) for row in rows[: settings.JOB_MARKET_SAMPLE_SIZE]]
    logger.info("Job market data fetched", role=role_label, postings=len(postings))
    return postings

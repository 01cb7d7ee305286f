"""Parsing of roadmap JSON out of LLM responses."""

import json
import re
from dataclasses import dataclass, field
from typing import Any

from masar.core.errors import RoadmapParseError
from masar.core.logging import get_logger

logger = get_logger(__name__)

# Greedy: spans from the first "{" to the last "}" in the text.
_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


@dataclass
class GeneratedRoadmap:
    """Topics and courses as returned by the model, fields unvalidated."""

    topics: list[dict[str, Any]] = field(default_factory=list)
    courses: list[dict[str, Any]] = field(default_factory=list)


def _try_parse_json(text: str) -> Any | None:
    """Attempt to parse JSON, returning None on failure."""
    try:
        return json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None


def _extract_json_object(text: str) -> str | None:
    """Return the brace-delimited span of the text, if any."""
    match = _JSON_OBJECT_RE.search(text)
    if match:
        return match.group(0)
    return None


def parse_llm_json_response(content: str | None) -> Any:
    """Parse a JSON value out of an LLM response.

    Strategies, in order:
    1. Direct json.loads of the whole text
    2. json.loads of the first-to-last brace span found in the text

    Raises:
        RoadmapParseError: If content is empty or no strategy yields JSON
    """
    if not content:
        raise RoadmapParseError("Empty LLM response")

    result = _try_parse_json(content)
    if result is not None:
        logger.debug("Parsed JSON using direct strategy")
        return result

    json_object = _extract_json_object(content)
    if json_object:
        result = _try_parse_json(json_object)
        if result is not None:
            logger.debug("Parsed JSON using brace extraction strategy")
            return result

    logger.error("Failed to parse LLM JSON response", content_preview=content[:200])
    raise RoadmapParseError("Failed to parse LLM JSON response: no valid JSON found")


def parse_roadmap_response(content: str | None) -> GeneratedRoadmap:
    """Parse ``{"roadmap": {"topics": [...], "courses": [...]}}`` from a response.

    Only the container shape is checked; individual topics and courses are
    passed through as the model wrote them.
    """
    data = parse_llm_json_response(content)
    roadmap = data.get("roadmap") if isinstance(data, dict) else None
    if not isinstance(roadmap, dict):
        raise RoadmapParseError("LLM response has no 'roadmap' object")

    topics = roadmap.get("topics")
    courses = roadmap.get("courses")
    if not isinstance(topics, list):
        raise RoadmapParseError("'roadmap.topics' is not an array")
    if not isinstance(courses, list):
        raise RoadmapParseError("'roadmap.courses' is not an array")

    return GeneratedRoadmap(topics=topics, courses=courses)

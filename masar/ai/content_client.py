"""Fetch raw roadmap content from the chat model."""

from collections.abc import Sequence
from typing import Any

from langchain_core.messages import HumanMessage, SystemMessage

from masar.ai.llm import get_llm
from masar.ai.prompts import ROADMAP_SYSTEM_PROMPT, build_roadmap_prompt
from masar.core.logging import get_logger

logger = get_logger(__name__)


async def fetch_roadmap_content(
    role_label: str,
    *,
    skills: Sequence[tuple[str, int | None]] | None = None,
    job_postings: Sequence[dict[str, Any]] | None = None,
) -> str:
    """Ask the model for a roadmap and return its raw text.

    No retries. Provider errors propagate to the caller unchanged.
    """
    llm = get_llm()
    prompt = build_roadmap_prompt(role_label, skills=skills, job_postings=job_postings)

    logger.info(
        "Requesting roadmap content",
        role=role_label,
        skill_count=len(skills or ()),
        posting_count=len(job_postings or ()),
    )
    resp = await llm.ainvoke(
        [
            SystemMessage(content=ROADMAP_SYSTEM_PROMPT),
            HumanMessage(content=prompt),
        ]
    )

    content = resp.content
    if not isinstance(content, str):
        # Multi-part responses: keep the text parts only
        content = "".join(
            part if isinstance(part, str) else part.get("text", "") for part in content
        )
    logger.debug("Roadmap content received", role=role_label, length=len(content))
    return content

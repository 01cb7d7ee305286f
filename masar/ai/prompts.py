"""Prompt template for roadmap generation."""

import json
from collections.abc import Sequence
from typing import Any

# Skills assessed at or above this level skip beginner material.
ADVANCED_SKILL_LEVEL = 6

ROADMAP_SYSTEM_PROMPT = """
You are an expert career assistant. You return structured JSON for a learning
roadmap that matches the following structure exactly:

{
  "roadmap": {
    "courses": [
      {
        "title": "Course title",
        "description": "Course description",
        "instructors": "Course instructors",
        "courseLink": "Course URL"
      }
    ],
    "topics": [
      {
        "title": "Topic title",
        "description": "Topic description",
        "tasks": [
          {
            "title": "Task title",
            "description": "Task description",
            "isCompleted": false,
            "order": 1
          }
        ]
      }
    ]
  }
}

IMPORTANT:
- Respond with only valid JSON, with no explanations or extra text
- The roadmap should have 6-10 topics
- Each topic should have 2-3 tasks
- Do not include null, empty, or placeholder values

Guidelines:
1. Topics must be technical and ordered from foundational to advanced
2. Tasks should be practical and actionable
3. Courses should be comprehensive and cover the topics effectively
4. Use real, existing courses from major platforms with working links
"""


def _format_skills(skills: Sequence[tuple[str, int | None]]) -> str:
    lines = ["Current skills and levels:"]
    guidance = ["Skill level requirements:"]
    for name, level in skills:
        lines.append(f"- {name}: {level if level is not None else 'Not assessed'}")
        if level is None or level >= ADVANCED_SKILL_LEVEL:
            guidance.append(f"- For {name.lower()}: focus on intermediate and advanced topics only")
        else:
            guidance.append(f"- For {name.lower()}: include topics from beginner to advanced")
    return "\n".join(lines + [""] + guidance)


def build_roadmap_prompt(
    role_label: str,
    *,
    skills: Sequence[tuple[str, int | None]] | None = None,
    job_postings: Sequence[dict[str, Any]] | None = None,
) -> str:
    """Build the user prompt for a role, optionally personalised."""
    parts = [f"Create a learning roadmap for a {role_label}."]
    if skills:
        parts.append(_format_skills(skills))
    if job_postings:
        parts.append(
            "Here is current job market data to ground the roadmap in:\n"
            + json.dumps(list(job_postings), indent=2, ensure_ascii=False)
        )
    return "\n\n".join(parts)

"""Tests for roadmap generation, compensation on failure and progress."""

import pytest
from sqlalchemy import func, select

from masar.core.database import get_db_session
from masar.core.errors import RoadmapExistsError, RoadmapGenerationError, UserNotFoundError
from masar.models import Course, Roadmap, RoadmapTopic, Task, User
from masar.schemas import RoadmapUpdate, TaskUpdate
from masar.services import course_service, roadmap_service, task_service


async def _count(session_factory, model) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count()).select_from(model))
        return result.scalar_one()


@pytest.mark.asyncio
async def test_create_career_roadmap(
    session_factory, seed_user: User, fake_llm, roadmap_response
) -> None:
    fake_llm(roadmap_response)

    roadmap = await roadmap_service.create_career_roadmap(seed_user.id, "Backend Developer")

    assert roadmap.user_id == seed_user.id
    assert roadmap.roadmap_role == "Backend Developer"
    assert [t.title for t in roadmap.topics] == ["Version Control", "APIs"]
    version_control = roadmap.topics[0]
    assert version_control.total_tasks == 1
    assert version_control.completed_tasks == 0
    assert [task.title for task in version_control.tasks] == ["Init repo"]
    assert [c.title for c in roadmap.courses] == ["Git Complete"]
    assert roadmap.courses[0].course_link == "https://example.com/git-complete"
    assert roadmap.roadmap_details["topics"][0]["title"] == "Version Control"
    course_snapshot = roadmap.roadmap_details["courses"][0]
    assert course_snapshot["courseLink"] == "https://example.com/git-complete"


@pytest.mark.asyncio
async def test_model_sees_role_and_skills(
    session_factory, seed_user: User, monkeypatch, roadmap_response
) -> None:
    captured = {}

    async def fake_fetch(role_label, *, skills=None, job_postings=None):
        captured.update(role=role_label, skills=list(skills), postings=job_postings)
        return roadmap_response

    monkeypatch.setattr(roadmap_service, "fetch_roadmap_content", fake_fetch)

    await roadmap_service.create_career_roadmap(seed_user.id, "Data Engineer")

    assert captured["role"] == "Data Engineer"
    assert sorted(captured["skills"]) == [("Docker", 2), ("Python", 7)]
    assert captured["postings"] == []


@pytest.mark.asyncio
async def test_unknown_user(session_factory, failing_llm) -> None:
    with pytest.raises(UserNotFoundError):
        await roadmap_service.create_career_roadmap(987654, "Backend Developer")
    assert failing_llm.calls == 0
    assert await _count(session_factory, Roadmap) == 0


@pytest.mark.asyncio
async def test_existing_roadmap(session_factory, seed_roadmap: Roadmap, failing_llm) -> None:
    with pytest.raises(RoadmapExistsError, match="already has a career roadmap"):
        await roadmap_service.create_career_roadmap(seed_roadmap.user_id, "Frontend Developer")
    assert failing_llm.calls == 0
    assert await _count(session_factory, Roadmap) == 1


@pytest.mark.asyncio
async def test_soft_deleted_roadmap_frees_the_user(
    session_factory, seed_roadmap: Roadmap, fake_llm, roadmap_response
) -> None:
    async with get_db_session() as db:
        assert await roadmap_service.soft_delete_roadmap(db, seed_roadmap.id) is not None

    fake_llm(roadmap_response)
    roadmap = await roadmap_service.create_career_roadmap(seed_roadmap.user_id, "DevOps")

    assert roadmap.id != seed_roadmap.id
    async with get_db_session() as db:
        assert await roadmap_service.get_roadmap(db, seed_roadmap.id) is None
        live = await roadmap_service.list_user_roadmaps(db, seed_roadmap.user_id)
        assert [r.id for r in live] == [roadmap.id]


@pytest.mark.asyncio
async def test_unparseable_response_discards_roadmap(
    session_factory, seed_user: User, fake_llm
) -> None:
    fake_llm("Sorry, I can't help with that.")

    with pytest.raises(RoadmapGenerationError) as exc_info:
        await roadmap_service.create_career_roadmap(seed_user.id, "Backend Developer")

    assert str(exc_info.value) == "Failed to generate roadmap content"
    assert await _count(session_factory, Roadmap) == 0
    assert await _count(session_factory, RoadmapTopic) == 0


@pytest.mark.asyncio
async def test_provider_error_discards_roadmap(
    session_factory, seed_user: User, failing_llm
) -> None:
    with pytest.raises(RoadmapGenerationError):
        await roadmap_service.create_career_roadmap(seed_user.id, "Backend Developer")

    assert failing_llm.calls == 1
    assert await _count(session_factory, Roadmap) == 0


@pytest.mark.asyncio
async def test_course_writer_failure_discards_everything(
    session_factory, seed_user: User, fake_llm, monkeypatch, roadmap_response
) -> None:
    fake_llm(roadmap_response)
    save_courses = course_service.save_courses

    async def broken_save_courses(db, roadmap_id, courses):
        raise RuntimeError("disk full")

    monkeypatch.setattr(course_service, "save_courses", broken_save_courses)

    with pytest.raises(RoadmapGenerationError) as exc_info:
        await roadmap_service.create_career_roadmap(seed_user.id, "Backend Developer")

    roadmap_id = exc_info.value.roadmap_id
    async with get_db_session() as db:
        assert await roadmap_service.get_roadmap(db, roadmap_id) is None
    for model in (Roadmap, RoadmapTopic, Task, Course):
        assert await _count(session_factory, model) == 0

    # The user can try again
    monkeypatch.setattr(course_service, "save_courses", save_courses)
    fake_llm(roadmap_response)
    roadmap = await roadmap_service.create_career_roadmap(seed_user.id, "Backend Developer")
    assert len(roadmap.courses) == 1


@pytest.mark.asyncio
async def test_update_roadmap(session_factory, seed_roadmap: Roadmap) -> None:
    async with get_db_session() as db:
        roadmap = await roadmap_service.update_roadmap(
            db, seed_roadmap.id, RoadmapUpdate(roadmap_role="Platform Engineer")
        )

    assert roadmap.roadmap_role == "Platform Engineer"
    assert roadmap.roadmap_details == {"topics": [], "courses": []}

    async with get_db_session() as db:
        assert await roadmap_service.update_roadmap(db, 5555, RoadmapUpdate()) is None


# ============================================================================
# Progress
# ============================================================================


@pytest.mark.parametrize(
    "progress, expected",
    [(0.0, "locked"), (0.5, "active"), (1.0, "completed")],
)
def test_calc_topic_status(progress: float, expected: str) -> None:
    assert roadmap_service.calc_topic_status(progress) == expected


def test_calc_topic_progress_without_tasks() -> None:
    topic = RoadmapTopic(title="Empty", total_tasks=0, completed_tasks=0)
    assert roadmap_service.calc_topic_progress(topic) == 0.0


@pytest.mark.asyncio
async def test_progress_follows_task_completion(
    session_factory, seed_user: User, fake_llm, roadmap_response
) -> None:
    fake_llm(roadmap_response)
    roadmap = await roadmap_service.create_career_roadmap(seed_user.id, "Backend Developer")
    apis = roadmap.topics[1]

    async with get_db_session() as db:
        await task_service.update_task(db, apis.tasks[0].id, TaskUpdate(is_completed=True))

    async with get_db_session() as db:
        loaded = await roadmap_service.get_roadmap(db, roadmap.id)
        progress = roadmap_service.get_roadmap_progress(loaded)

    assert progress["completed_tasks"] == 1
    assert progress["total_tasks"] == 3
    assert progress["overall_progress"] == pytest.approx(0.25)
    assert [t["status"] for t in progress["topics"]] == ["locked", "active"]
    assert progress["topics"][1]["progress"] == pytest.approx(0.5)

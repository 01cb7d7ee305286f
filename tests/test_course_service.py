"""Tests for course_service."""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from masar.ai.llm_utils import GeneratedRoadmap
from masar.core.database import get_db_session
from masar.models import Course, Roadmap
from masar.schemas import CourseUpdate
from masar.services import course_service


def _courses() -> list[dict]:
    return [
        {
            "title": "Git Complete",
            "description": "Everything git",
            "instructors": "Jason Taylor",
            "courseLink": "https://example.com/git",
        },
        {
            "title": "HTTP in Depth",
            "courseLink": "https://example.com/http",
        },
    ]


async def _links(session_factory, roadmap_id: int) -> list[str]:
    async with session_factory() as session:
        result = await session.execute(
            select(Course.course_link).where(Course.roadmap_id == roadmap_id).order_by(Course.id)
        )
        return list(result.scalars().all())


@pytest.mark.asyncio
async def test_save_courses(session_factory, seed_roadmap: Roadmap) -> None:
    async with get_db_session() as db:
        created = await course_service.save_courses(db, seed_roadmap.id, _courses())

    assert [c.title for c in created] == ["Git Complete", "HTTP in Depth"]
    assert created[0].instructors == "Jason Taylor"
    assert created[1].description is None
    assert await _links(session_factory, seed_roadmap.id) == [
        "https://example.com/git",
        "https://example.com/http",
    ]


@pytest.mark.asyncio
async def test_save_courses_writes_snapshot(session_factory, seed_roadmap: Roadmap) -> None:
    courses = _courses()
    async with get_db_session() as db:
        await course_service.save_courses(db, seed_roadmap.id, courses)

    async with session_factory() as session:
        roadmap = await session.get(Roadmap, seed_roadmap.id)
        assert roadmap.roadmap_details == {"topics": [], "courses": courses}


@pytest.mark.asyncio
async def test_save_courses_unknown_roadmap(session_factory) -> None:
    with pytest.raises(ValueError, match="not found"):
        async with get_db_session() as db:
            await course_service.save_courses(db, 999999, _courses())


@pytest.mark.asyncio
async def test_existing_links_are_skipped(session_factory, seed_roadmap: Roadmap) -> None:
    async with get_db_session() as db:
        await course_service.save_courses(db, seed_roadmap.id, _courses())

    rerun = [
        {"title": "Renamed", "courseLink": "https://example.com/git"},
        {"title": "SQL Basics", "courseLink": "https://example.com/sql"},
        {"title": "SQL Basics again", "courseLink": "https://example.com/sql"},
    ]
    async with get_db_session() as db:
        created = await course_service.save_courses(db, seed_roadmap.id, rerun)

    assert [c.title for c in created] == ["SQL Basics"]
    async with session_factory() as session:
        result = await session.execute(
            select(Course.title).where(Course.course_link == "https://example.com/git")
        )
        assert result.scalar_one() == "Git Complete"


@pytest.mark.asyncio
async def test_course_without_link_is_skipped(session_factory, seed_roadmap: Roadmap) -> None:
    courses = [
        {"title": "No link"},
        {"title": "", "courseLink": "https://example.com/untitled"},
    ]
    async with get_db_session() as db:
        created = await course_service.save_courses(db, seed_roadmap.id, courses)

    assert len(created) == 1
    assert created[0].title == "https://example.com/untitled"


@pytest.mark.asyncio
async def test_generate_and_save_courses_with_content(
    session_factory, seed_roadmap: Roadmap, failing_llm
) -> None:
    content = GeneratedRoadmap(topics=[], courses=_courses())
    created = await course_service.generate_and_save_courses(
        seed_roadmap.id, "Backend Developer", content=content
    )

    assert len(created) == 2
    assert failing_llm.calls == 0


@pytest.mark.asyncio
async def test_update_course(session_factory, seed_roadmap: Roadmap) -> None:
    async with get_db_session() as db:
        created = await course_service.save_courses(db, seed_roadmap.id, _courses())
    course_id = created[1].id

    data = CourseUpdate(
        title="HTTP, The Definitive Guide",
        course_link="https://example.com/http-guide",
        instructors="D. Gourley",
    )
    async with get_db_session() as db:
        course = await course_service.update_course(db, course_id, data)

    assert course.title == "HTTP, The Definitive Guide"
    assert course.course_link == "https://example.com/http-guide"
    assert course.instructors == "D. Gourley"


@pytest.mark.asyncio
async def test_update_course_link_collision(session_factory, seed_roadmap: Roadmap) -> None:
    async with get_db_session() as db:
        created = await course_service.save_courses(db, seed_roadmap.id, _courses())
    course_id = created[1].id

    data = CourseUpdate(title="Clash", course_link="https://example.com/git")
    with pytest.raises(IntegrityError):
        async with get_db_session() as db:
            await course_service.update_course(db, course_id, data)

    async with get_db_session() as db:
        course = await course_service.get_course(db, course_id)
        assert course.course_link == "https://example.com/http"


@pytest.mark.asyncio
async def test_update_unknown_course(session_factory) -> None:
    data = CourseUpdate(title="x", course_link="https://example.com/x")
    async with get_db_session() as db:
        assert await course_service.update_course(db, 31337, data) is None


@pytest.mark.asyncio
async def test_soft_delete_course(session_factory, seed_roadmap: Roadmap) -> None:
    async with get_db_session() as db:
        created = await course_service.save_courses(db, seed_roadmap.id, _courses())
    course_id = created[0].id

    async with get_db_session() as db:
        deleted = await course_service.soft_delete_course(db, course_id)
    assert deleted is not None
    assert deleted.deleted_at is not None

    async with get_db_session() as db:
        assert await course_service.get_course(db, course_id) is None
        remaining = await course_service.list_courses(db, seed_roadmap.id)
        assert [c.title for c in remaining] == ["HTTP in Depth"]
        assert await course_service.soft_delete_course(db, course_id) is None

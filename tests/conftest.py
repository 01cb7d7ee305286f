"""Shared fixtures: an isolated SQLite database per test and a fake LLM."""

import json
import uuid
from collections.abc import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from masar.ai import content_client
from masar.core import database
from masar.core.config import get_settings
from masar.core.database import Base, create_engine, create_session_factory
from masar.core.ratelimit import roadmap_rate_limiter
from masar.main import app
from masar.models import Roadmap, User, UserSkill


class FailingLLM:
    """Chat model stand-in whose every call fails like an unreachable provider."""

    def __init__(self, error: Exception | None = None):
        self.error = error or RuntimeError("provider unavailable")
        self.calls = 0

    async def ainvoke(self, messages, **kwargs):
        self.calls += 1
        raise self.error


@pytest.fixture(autouse=True)
def _isolate_external_services(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(get_settings(), "JSEARCH_API_KEY", None)
    roadmap_rate_limiter.reset()


@pytest_asyncio.fixture
async def session_factory(
    tmp_path, monkeypatch: pytest.MonkeyPatch
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Point the application's session factory at a fresh database file."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'masar-test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = create_session_factory(engine)
    monkeypatch.setattr(database, "AsyncSessionLocal", factory)
    yield factory
    await engine.dispose()


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def fake_llm(monkeypatch: pytest.MonkeyPatch) -> Callable[..., object]:
    """Install a chat model that answers with the given responses in turn."""

    def install(*responses: str) -> FakeListChatModel:
        llm = FakeListChatModel(responses=list(responses))
        monkeypatch.setattr(content_client, "get_llm", lambda: llm)
        return llm

    return install


@pytest.fixture
def failing_llm(monkeypatch: pytest.MonkeyPatch) -> FailingLLM:
    llm = FailingLLM()
    monkeypatch.setattr(content_client, "get_llm", lambda: llm)
    return llm


@pytest_asyncio.fixture
async def seed_user(session_factory) -> User:
    """Create a committed user with two assessed skills."""
    async with session_factory() as session:
        user = User(email=f"{uuid.uuid4().hex[:8]}@test.com", name="Test User")
        user.skills = [UserSkill(name="Python", level=7), UserSkill(name="Docker", level=2)]
        session.add(user)
        await session.commit()
        return user


@pytest_asyncio.fixture
async def seed_roadmap(session_factory, seed_user: User) -> Roadmap:
    """Create a committed, empty roadmap for the seed user."""
    async with session_factory() as session:
        roadmap = Roadmap(
            user_id=seed_user.id,
            roadmap_role="Backend Developer",
            roadmap_details={"topics": [], "courses": []},
        )
        session.add(roadmap)
        await session.commit()
        return roadmap


@pytest.fixture
def roadmap_response() -> str:
    """A well-formed model answer with two topics and one course."""
    return json.dumps(
        {
            "roadmap": {
                "topics": [
                    {
                        "title": "Version Control",
                        "description": "Track changes with git",
                        "tasks": [
                            {"title": "Init repo", "description": "Run git init", "order": 1}
                        ],
                    },
                    {
                        "title": "APIs",
                        "description": "Design REST endpoints",
                        "tasks": [
                            {"title": "Write a GET endpoint", "description": "", "order": 1},
                            {"title": "Write a POST endpoint", "description": "", "order": 2},
                        ],
                    },
                ],
                "courses": [
                    {
                        "title": "Git Complete",
                        "description": "From basics to rebase",
                        "instructors": "Jason Taylor",
                        "courseLink": "https://example.com/git-complete",
                    }
                ],
            }
        }
    )

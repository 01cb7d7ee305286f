"""Database configuration."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from masar.core.config import get_settings
from masar.core.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()


def configure_sqlite(engine: AsyncEngine) -> None:
    """Take transaction control away from the sqlite3 driver.

    The driver's implicit BEGIN breaks SAVEPOINT handling, and deferred
    transactions let two concurrent writers deadlock on lock promotion.
    Every transaction therefore starts with an explicit BEGIN IMMEDIATE.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine with dialect-specific setup applied."""
    new_engine = create_async_engine(url, echo=echo, future=True)
    configure_sqlite(new_engine)
    return new_engine


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = create_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
AsyncSessionLocal = create_session_factory(engine)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


async def init_db() -> None:
    """Initialize database tables."""
    async with engine.begin() as conn:
        logger.info("Creating database tables")
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections."""
    logger.info("Closing database connections")
    await engine.dispose()


@asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Open a session whose transaction commits on exit and rolls back on error.

    Each call is an independent unit of work; concurrent callers never share
    a transaction.
    """
    session = AsyncSessionLocal()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the error comes from a UNIQUE constraint or unique index."""
    # PostgreSQL drivers expose the SQLSTATE; SQLite only reports it in the message.
    sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == "23505"
    return "UNIQUE constraint failed" in str(exc.orig)


async def insert_unless_duplicate(db: AsyncSession, obj: object) -> bool:
    """Insert ``obj`` inside a SAVEPOINT.

    Returns False when a unique constraint rejects the row, which callers
    treat as "already exists". The enclosing transaction stays usable. Any
    other integrity error (NOT NULL, foreign key) propagates.
    """
    try:
        async with db.begin_nested():
            db.add(obj)
    except IntegrityError as exc:
        if not is_unique_violation(exc):
            raise
        return False
    return True

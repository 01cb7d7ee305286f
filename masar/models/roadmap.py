"""Career roadmap models: roadmap, topics, tasks and courses."""

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from masar.core.database import Base


class Roadmap(Base):
    """A user's single career path."""

    __tablename__ = "career_roadmaps"
    __table_args__ = (
        # One live roadmap per user; soft-deleted rows don't count.
        Index(
            "unique_active_roadmap_per_user",
            "user_id",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    roadmap_role: Mapped[str] = mapped_column(String)

    # Snapshot of the last parsed AI content, not normalized
    roadmap_details: Mapped[dict] = mapped_column(JSON, default=dict)

    topics: Mapped[list["RoadmapTopic"]] = relationship(
        back_populates="roadmap",
        order_by=lambda: [RoadmapTopic.order, RoadmapTopic.id],
    )
    courses: Mapped[list["Course"]] = relationship(back_populates="roadmap", order_by="Course.id")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, default=None)


class RoadmapTopic(Base):
    """A step in the learning sequence of a roadmap."""

    __tablename__ = "roadmap_topics"
    __table_args__ = (UniqueConstraint("roadmap_id", "title", name="unique_roadmap_topic_title"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    roadmap_id: Mapped[int] = mapped_column(ForeignKey("career_roadmaps.id"))

    title: Mapped[str] = mapped_column(String)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    order: Mapped[int] = mapped_column(Integer, default=0)

    # Progress counters
    total_tasks: Mapped[int] = mapped_column(Integer, default=0)
    completed_tasks: Mapped[int] = mapped_column(Integer, default=0)

    roadmap: Mapped[Roadmap] = relationship(back_populates="topics")
    tasks: Mapped[list["Task"]] = relationship(
        back_populates="topic", order_by=lambda: [Task.order, Task.id]
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, default=None)


class Task(Base):
    """Actionable item within a topic."""

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(primary_key=True)
    topic_id: Mapped[int] = mapped_column(ForeignKey("roadmap_topics.id"))

    title: Mapped[str] = mapped_column(String)
    description: Mapped[str] = mapped_column(Text, default="")
    order: Mapped[int] = mapped_column(Integer, default=0)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False)

    topic: Mapped[RoadmapTopic] = relationship(back_populates="tasks")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class Course(Base):
    """External course recommended for a roadmap."""

    __tablename__ = "courses"
    __table_args__ = (
        UniqueConstraint("roadmap_id", "course_link", name="unique_roadmap_course_link"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    roadmap_id: Mapped[int] = mapped_column(ForeignKey("career_roadmaps.id"))

    title: Mapped[str] = mapped_column(String)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    instructors: Mapped[str | None] = mapped_column(String, default=None)
    course_link: Mapped[str] = mapped_column(String)

    roadmap: Mapped[Roadmap] = relationship(back_populates="courses")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, default=None)

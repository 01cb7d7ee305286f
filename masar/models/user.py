"""User model."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from masar.core.database import Base


class User(Base):
    """Account that owns a career roadmap."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String, unique=True)
    name: Mapped[str | None] = mapped_column(String, default=None)

    skills: Mapped[list["UserSkill"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", order_by="UserSkill.id"
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class UserSkill(Base):
    """Self-assessed skill, used to pitch generated roadmaps at the right level."""

    __tablename__ = "user_skills"
    __table_args__ = (UniqueConstraint("user_id", "name", name="unique_user_skill_name"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    name: Mapped[str] = mapped_column(String)
    level: Mapped[int | None] = mapped_column(Integer, default=None)  # 0-10, None = not assessed

    user: Mapped[User] = relationship(back_populates="skills")

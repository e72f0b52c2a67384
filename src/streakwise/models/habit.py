"""Habit and completion tables."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .user import User

FREQUENCY_DAILY = "daily"
FREQUENCY_WEEKLY = "weekly"
FREQUENCY_CUSTOM = "custom"
FREQUENCY_INTERVAL = "interval"
FREQUENCIES = (FREQUENCY_DAILY, FREQUENCY_WEEKLY, FREQUENCY_CUSTOM, FREQUENCY_INTERVAL)
DEFAULT_COLOR = "#6366f1"


class Habit(SQLModel, table=True):
    """A user-defined habit and its scheduling rule."""

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=100, index=True)
    description: Optional[str] = Field(default=None, max_length=500)
    color: str = Field(default=DEFAULT_COLOR, max_length=7)
    frequency: str = Field(default=FREQUENCY_DAILY, max_length=16)
    # Comma-separated Sunday-first weekday numbers, e.g. "1,3,5"
    custom_days: str = Field(default="", max_length=32)
    target_per_week: Optional[int] = Field(default=None)
    interval_days: Optional[int] = Field(default=None)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    archived: bool = Field(default=False, nullable=False)

    completions: list["HabitCompletion"] = Relationship(
        back_populates="habit",
        sa_relationship=relationship(
            "HabitCompletion", back_populates="habit", cascade="all, delete-orphan"
        ),
    )

    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="habits"))


class HabitCompletion(SQLModel, table=True):
    """A habit marked complete on one calendar day."""

    __tablename__: ClassVar[str] = "habit_completion"
    __table_args__ = (UniqueConstraint("habit_id", "completed_on", name="uq_completion_day"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    habit_id: int = Field(foreign_key="habit.id", nullable=False, index=True)
    completed_on: date = Field(nullable=False, index=True)
    note: Optional[str] = Field(default=None, max_length=500)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    habit: "Habit" = Relationship(
        back_populates="completions",
        sa_relationship=relationship("Habit", back_populates="completions"),
    )

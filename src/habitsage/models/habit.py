"""Habit tracking data structures."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import ClassVar, Optional

from sqlalchemy import JSON, Column
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel


class FrequencyType(str, Enum):
    """Schedule kinds a habit can follow."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"
    ANYTIME = "anytime"


class Habit(SQLModel, table=True):
    """A user-defined recurring task with a schedule."""

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(nullable=False, index=True)
    title: str = Field(nullable=False, max_length=80, index=True)
    description: Optional[str] = Field(default=None, max_length=255)
    icon: str = Field(default="", max_length=16)
    color: str = Field(default="#a78bfa", max_length=16)

    # 0-6 (Sunday first) for weekly, 1-31 for monthly
    frequency_type: str = Field(default=FrequencyType.DAILY.value, max_length=16)
    frequency_days: Optional[list[int]] = Field(default=None, sa_column=Column(JSON))
    frequency_interval: Optional[int] = Field(default=None)
    frequency_target: Optional[int] = Field(default=None)

    reminder_time: Optional[str] = Field(default=None, max_length=5)
    sort_order: int = Field(default=0, nullable=False, index=True)
    category: Optional[str] = Field(default=None, max_length=64)
    created_at: datetime = Field(default_factory=datetime.now, nullable=False)
    updated_at: datetime = Field(default_factory=datetime.now, nullable=False)
    archived_at: Optional[datetime] = Field(default=None)

    completions: list["Completion"] = Relationship(
        back_populates="habit",
        sa_relationship=relationship(
            "Completion", back_populates="habit", cascade="all, delete-orphan"
        ),
    )

    @property
    def is_archived(self) -> bool:
        return self.archived_at is not None


class Completion(SQLModel, table=True):
    """Timestamped record that a habit was performed."""

    __tablename__: ClassVar[str] = "completion"

    id: Optional[int] = Field(default=None, primary_key=True)
    habit_id: int = Field(foreign_key="habit.id", nullable=False, index=True)
    user_id: int = Field(nullable=False, index=True)
    completed_at: datetime = Field(nullable=False, index=True)
    notes: Optional[str] = Field(default=None, max_length=500)

    habit: "Habit" = Relationship(
        back_populates="completions",
        sa_relationship=relationship("Habit", back_populates="completions"),
    )

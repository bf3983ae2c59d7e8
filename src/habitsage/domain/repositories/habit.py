"""Habit repository protocol."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ...models.habit import Completion, Habit


class HabitRepository(Protocol):
    """Repository for habits and their completions, scoped per user."""

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_all(self, *, user_id: int, include_archived: bool = False) -> list[Habit]:
        """List habits ordered by sort order, optionally including archived ones."""
        ...

    def list_active(self, *, user_id: int) -> list[Habit]:
        """List non-archived habits ordered by sort order."""
        ...

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        """Create a new habit."""
        ...

    def update(self, habit: Habit, *, user_id: int) -> Habit:
        """Update an existing habit."""
        ...

    def archive(self, habit_id: int, *, user_id: int, archived_at: datetime) -> Optional[Habit]:
        """Mark a habit archived."""
        ...

    def delete(self, habit_id: int, *, user_id: int) -> None:
        """Delete a habit and its completions."""
        ...

    # Completion operations
    def add_completion(self, completion: Completion, *, user_id: int) -> Completion:
        """Record a completion."""
        ...

    def get_completions_for_habit(self, habit_id: int, *, user_id: int) -> list[Completion]:
        """Get every completion of a habit, oldest first."""
        ...

    def get_completions_between(
        self, habit_id: int, start: datetime, end: datetime, *, user_id: int
    ) -> list[Completion]:
        """Get completions with start <= completed_at < end."""
        ...

    def delete_completion(self, completion_id: int, *, user_id: int) -> None:
        """Delete a completion by ID."""
        ...

"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from sqlmodel import Session, select

from ...models.habit import Completion, Habit


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int, include_archived: bool = False) -> list[Habit]:
        """List habits ordered by sort order, optionally including archived ones."""
        with self.session_factory() as session:
            statement = (
                select(Habit)
                .where(Habit.user_id == user_id)
                .order_by(Habit.sort_order, Habit.id)  # type: ignore
            )

            if not include_archived:
                statement = statement.where(Habit.archived_at == None)  # noqa: E711

            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_active(self, *, user_id: int) -> list[Habit]:
        """List non-archived habits ordered by sort order."""
        return self.list_all(user_id=user_id, include_archived=False)

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        """Create a new habit."""
        with self.session_factory() as session:
            habit.user_id = user_id
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def update(self, habit: Habit, *, user_id: int) -> Habit:
        """Update an existing habit."""
        with self.session_factory() as session:
            habit.user_id = user_id
            habit = session.merge(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def archive(self, habit_id: int, *, user_id: int, archived_at: datetime) -> Optional[Habit]:
        """Mark a habit archived."""
        with self.session_factory() as session:
            habit = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if habit is None:
                return None
            habit.archived_at = archived_at
            habit.updated_at = archived_at
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def delete(self, habit_id: int, *, user_id: int) -> None:
        """Delete a habit and its completions."""
        with self.session_factory() as session:
            habit = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if habit:
                session.delete(habit)
                session.commit()

    # Completion operations
    def add_completion(self, completion: Completion, *, user_id: int) -> Completion:
        """Record a completion."""
        with self.session_factory() as session:
            completion.user_id = user_id
            session.add(completion)
            session.commit()
            session.refresh(completion)
            session.expunge(completion)
            return completion

    def get_completions_for_habit(self, habit_id: int, *, user_id: int) -> list[Completion]:
        """Get every completion of a habit, oldest first."""
        with self.session_factory() as session:
            statement = (
                select(Completion)
                .where(Completion.user_id == user_id)
                .where(Completion.habit_id == habit_id)
                .order_by(Completion.completed_at, Completion.id)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def get_completions_between(
        self, habit_id: int, start: datetime, end: datetime, *, user_id: int
    ) -> list[Completion]:
        """Get completions with start <= completed_at < end."""
        with self.session_factory() as session:
            statement = (
                select(Completion)
                .where(Completion.user_id == user_id)
                .where(Completion.habit_id == habit_id)
                .where(Completion.completed_at >= start)
                .where(Completion.completed_at < end)
                .order_by(Completion.completed_at)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def delete_completion(self, completion_id: int, *, user_id: int) -> None:
        """Delete a completion by ID."""
        with self.session_factory() as session:
            completion = session.exec(
                select(Completion)
                .where(Completion.user_id == user_id)
                .where(Completion.id == completion_id)
            ).first()

            if completion:
                session.delete(completion)
                session.commit()

"""Pytest configuration and shared fixtures for HabitSage tests.

Provides database fixtures and test data factories for exercising the
streak engine, repositories and services without touching the real app
database.
"""

from __future__ import annotations

import tempfile
from datetime import datetime
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from habitsage.models import Completion, Habit

TEST_USER_ID = 1


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a database session for a single test."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory for repositories that expect Callable[[], Session]."""

    def factory():
        return Session(db_engine, expire_on_commit=False)

    return factory


@pytest.fixture
def user_id() -> int:
    return TEST_USER_ID


@pytest.fixture
def now() -> datetime:
    """A fixed Wednesday morning used as the evaluation time."""
    return datetime(2024, 3, 13, 9, 30)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def habit_factory(db_session, user_id):
    """Factory for creating persisted test habits."""

    def _create_habit(
        title: str = "Test Habit",
        frequency_type: str = "daily",
        frequency_days: list[int] | None = None,
        sort_order: int = 0,
        archived_at: datetime | None = None,
        owner_id: int | None = None,
    ) -> Habit:
        habit = Habit(
            user_id=owner_id if owner_id is not None else user_id,
            title=title,
            frequency_type=frequency_type,
            frequency_days=frequency_days,
            sort_order=sort_order,
            archived_at=archived_at,
        )
        db_session.add(habit)
        db_session.commit()
        db_session.refresh(habit)
        return habit

    return _create_habit


@pytest.fixture
def completion_factory(db_session):
    """Factory for creating persisted completions."""

    def _create_completion(habit: Habit, completed_at: datetime, notes: str | None = None) -> Completion:
        completion = Completion(
            habit_id=habit.id,
            user_id=habit.user_id,
            completed_at=completed_at,
            notes=notes,
        )
        db_session.add(completion)
        db_session.commit()
        db_session.refresh(completion)
        return completion

    return _create_completion

"""Habit service: the repository-backed replacement for the app's habit store."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Callable, Mapping, Optional

from ..domain.repositories.habit import HabitRepository
from ..logging_config import get_logger
from ..models.habit import Completion, FrequencyType, Habit
from .frequency import is_habit_due_today, validate_frequency
from .streaks import StreakData, compute_streak_data

logger = get_logger("services.habits")

DEMO_HABITS: tuple[dict[str, Any], ...] = (
    {
        "title": "Morning Workout",
        "description": "30 mins of cardio",
        "icon": "🏋️",
        "color": "#a78bfa",
        "frequency_type": FrequencyType.DAILY.value,
        "sort_order": 0,
        "category": "Health",
    },
    {
        "title": "Read a Book",
        "description": "Read 20 pages",
        "icon": "📚",
        "color": "#34d399",
        "frequency_type": FrequencyType.DAILY.value,
        "sort_order": 1,
        "category": "Education",
    },
)

_HABIT_FIELDS = (
    "title",
    "description",
    "icon",
    "color",
    "frequency_type",
    "frequency_days",
    "frequency_interval",
    "frequency_target",
    "reminder_time",
    "sort_order",
    "category",
)


class HabitNotFoundError(LookupError):
    """Raised when a habit id does not resolve for the current user."""


def _validate_reminder_time(value: Optional[str]) -> None:
    if value is None:
        return
    try:
        datetime.strptime(value, "%H:%M")
    except ValueError as exc:
        raise ValueError(f"Reminder time must be HH:MM, got {value!r}") from exc


def _day_bounds(now: datetime) -> tuple[datetime, datetime]:
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


class HabitService:
    """Habit use cases for a single user over an injected repository."""

    def __init__(
        self,
        repository: HabitRepository,
        *,
        user_id: int,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.repository = repository
        self.user_id = user_id
        self.clock = clock

    def _now(self, now: Optional[datetime]) -> datetime:
        return now if now is not None else self.clock()

    def _require_habit(self, habit_id: int) -> Habit:
        habit = self.repository.get_by_id(habit_id, user_id=self.user_id)
        if habit is None:
            raise HabitNotFoundError(f"Habit {habit_id} not found")
        return habit

    def active_habits(self) -> list[Habit]:
        """Non-archived habits ordered by sort order."""
        habits = self.repository.list_active(user_id=self.user_id)
        return sorted((h for h in habits if not h.is_archived), key=lambda h: h.sort_order)

    def habits_due_today(self, now: Optional[datetime] = None) -> list[Habit]:
        current = self._now(now)
        return [h for h in self.active_habits() if is_habit_due_today(h, current)]

    def get_habit_completions(self, habit_id: int) -> list[Completion]:
        return self.repository.get_completions_for_habit(habit_id, user_id=self.user_id)

    def is_habit_completed_today(self, habit_id: int, now: Optional[datetime] = None) -> bool:
        start, end = _day_bounds(self._now(now))
        return bool(
            self.repository.get_completions_between(habit_id, start, end, user_id=self.user_id)
        )

    def create_habit(self, data: Mapping[str, Any], now: Optional[datetime] = None) -> Habit:
        """Validate input and persist a new habit owned by the current user."""

        title = str(data.get("title") or "").strip()
        if not title:
            raise ValueError("Habit title is required")
        kind = str(data.get("frequency_type") or FrequencyType.DAILY.value)
        validate_frequency(kind, data.get("frequency_days"))
        _validate_reminder_time(data.get("reminder_time"))

        stamp = self._now(now)
        fields = {key: data[key] for key in _HABIT_FIELDS if data.get(key) is not None}
        fields.update(title=title, frequency_type=kind)
        habit = Habit(
            **fields,
            user_id=self.user_id,
            created_at=stamp,
            updated_at=stamp,
            archived_at=None,
        )
        created = self.repository.create(habit, user_id=self.user_id)
        logger.info(
            "Habit created",
            extra={"habit_id": created.id, "frequency": kind, "user_id": self.user_id},
        )
        return created

    def complete_habit(
        self, habit_id: int, now: Optional[datetime] = None, notes: Optional[str] = None
    ) -> Optional[Completion]:
        """Record today's completion; returns None if one already exists."""

        current = self._now(now)
        self._require_habit(habit_id)
        if self.is_habit_completed_today(habit_id, current):
            logger.info(
                "Habit already completed today",
                extra={"habit_id": habit_id, "user_id": self.user_id},
            )
            return None

        completion = Completion(
            habit_id=habit_id,
            user_id=self.user_id,
            completed_at=current,
            notes=notes,
        )
        recorded = self.repository.add_completion(completion, user_id=self.user_id)
        logger.info(
            "Habit completed",
            extra={"habit_id": habit_id, "completion_id": recorded.id, "user_id": self.user_id},
        )
        return recorded

    def archive_habit(self, habit_id: int, now: Optional[datetime] = None) -> Habit:
        archived = self.repository.archive(
            habit_id, user_id=self.user_id, archived_at=self._now(now)
        )
        if archived is None:
            raise HabitNotFoundError(f"Habit {habit_id} not found")
        logger.info("Habit archived", extra={"habit_id": habit_id, "user_id": self.user_id})
        return archived

    def streak_data(self, habit_id: int, now: Optional[datetime] = None) -> StreakData:
        """Streak and heatmap statistics for one habit."""

        self._require_habit(habit_id)
        return compute_streak_data(self.get_habit_completions(habit_id), self._now(now))

    def seed_demo_habits(self) -> list[Habit]:
        """Create the demo habits when the user has none yet."""

        if self.repository.list_all(user_id=self.user_id, include_archived=True):
            return []
        created = [self.create_habit(data) for data in DEMO_HABITS]
        logger.info("Demo habits seeded", extra={"count": len(created)})
        return created


__all__ = ["DEMO_HABITS", "HabitNotFoundError", "HabitService"]

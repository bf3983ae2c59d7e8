"""Streak and heatmap statistics computed from a habit's completion history."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterable, Sequence


class InvalidCompletionError(ValueError):
    """Raised when a completion carries a missing or malformed timestamp."""


@dataclass(slots=True, frozen=True)
class HeatmapCell:
    """Completion count for one calendar day (``YYYY-MM-DD``)."""

    date: str
    count: int


@dataclass(slots=True)
class StreakData:
    """Statistics bundle consumed by views and the CLI."""

    current: int
    longest: int
    completion_rate: float
    heatmap_data: list[HeatmapCell] = field(default_factory=list)


def _today(now: date) -> date:
    if isinstance(now, datetime):
        return now.date()
    if isinstance(now, date):
        return now
    raise TypeError(f"now must be a date or datetime, got {type(now).__name__}")


def completion_day(completion: Any, now: date) -> date:
    """Truncate a completion's timestamp to its local calendar day.

    Aware timestamps are shifted into ``now``'s timezone when ``now`` is aware;
    naive timestamps are taken as already local.
    """

    value = getattr(completion, "completed_at", None)
    if isinstance(value, datetime):
        tz = now.tzinfo if isinstance(now, datetime) else None
        if value.tzinfo is not None and tz is not None:
            value = value.astimezone(tz)
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidCompletionError(
        f"Completion {getattr(completion, 'id', None)!r} has invalid completed_at: {value!r}"
    )


def completion_days(completions: Iterable[Any], now: date) -> list[date]:
    """Return the distinct completed days, most recent first."""

    return sorted({completion_day(c, now) for c in completions}, reverse=True)


def calculate_completion_rate(completions: Sequence[Any]) -> float:
    """Return the completion metric.

    This is the raw number of completion records, not a percentage. Views
    already depend on the count, so it stays until a real rate is defined.
    """

    return float(len(completions))


def generate_heatmap_data(completions: Iterable[Any], now: date) -> list[HeatmapCell]:
    """Group every completion (duplicates included) by day, ascending by date."""

    counts = Counter(completion_day(c, now) for c in completions)
    return [HeatmapCell(date=day.isoformat(), count=counts[day]) for day in sorted(counts)]


def compute_streak_data(completions: Iterable[Any], now: date) -> StreakData:
    """Compute current/longest streaks, completion metric and heatmap.

    ``completions`` may be unsorted and hold several records per day; each
    distinct day counts once for streaks. ``current`` is the length of the run
    ending on the most recent completed day, and only when that day is today
    or yesterday relative to ``now``.
    """

    snapshot = list(completions)
    today = _today(now)
    days = completion_days(snapshot, now)
    if not days:
        return StreakData(current=0, longest=0, completion_rate=0, heatmap_data=[])

    longest = 0
    run = 0
    most_recent_run: int | None = None
    last_day: date | None = None
    for day in days:
        if last_day is None or (last_day - day).days == 1:
            run += 1
        else:
            longest = max(longest, run)
            if most_recent_run is None:
                most_recent_run = run
            run = 1
        last_day = day
    longest = max(longest, run)
    if most_recent_run is None:
        most_recent_run = run

    current = most_recent_run if (today - days[0]).days in (0, 1) else 0

    return StreakData(
        current=current,
        longest=longest,
        completion_rate=calculate_completion_rate(snapshot),
        heatmap_data=generate_heatmap_data(snapshot, now),
    )


__all__ = [
    "HeatmapCell",
    "InvalidCompletionError",
    "StreakData",
    "calculate_completion_rate",
    "completion_day",
    "completion_days",
    "compute_streak_data",
    "generate_heatmap_data",
]

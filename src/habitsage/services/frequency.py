"""Schedule helpers deciding whether a habit is due on a given day."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..models.habit import FrequencyType

_DAY_RANGES = {
    FrequencyType.WEEKLY.value: range(0, 7),
    FrequencyType.MONTHLY.value: range(1, 32),
}


def _frequency_value(raw: Any) -> str:
    return raw.value if isinstance(raw, FrequencyType) else str(raw)


def is_habit_due_today(habit: Any, now: date) -> bool:
    """Return True when the habit's schedule calls for action on ``now``.

    Weekly days use 0=Sunday..6=Saturday; monthly days are days of the month.
    Custom (interval) schedules are not evaluated and are never due.
    """

    kind = _frequency_value(habit.frequency_type)

    if kind in (FrequencyType.DAILY.value, FrequencyType.ANYTIME.value):
        return True
    days = getattr(habit, "frequency_days", None)
    if kind == FrequencyType.WEEKLY.value:
        return bool(days) and now.isoweekday() % 7 in days
    if kind == FrequencyType.MONTHLY.value:
        return bool(days) and now.day in days
    return False


def validate_frequency(kind: str, days: Optional[list[int]]) -> None:
    """Reject unknown frequency types and day numbers the type cannot use."""

    valid = {f.value for f in FrequencyType}
    if kind not in valid:
        raise ValueError(f"Unknown frequency type {kind!r}; expected one of {sorted(valid)}")
    if not days:
        return
    allowed = _DAY_RANGES.get(kind)
    if allowed is None:
        raise ValueError(f"{kind} habits do not take a day list")
    bad = [d for d in days if d not in allowed]
    if bad:
        raise ValueError(
            f"Days {bad} out of range for {kind} habits ({allowed.start}-{allowed.stop - 1})"
        )


def parse_frequency_days(text: Optional[str], kind: str) -> Optional[list[int]]:
    """Parse a comma separated day list such as ``"1,3,5"``."""

    if text is None or not text.strip():
        return None
    try:
        days = sorted({int(part) for part in text.split(",") if part.strip()})
    except ValueError as exc:
        raise ValueError(f"Days must be comma separated integers, got {text!r}") from exc
    validate_frequency(kind, days)
    return days


__all__ = ["is_habit_due_today", "parse_frequency_days", "validate_frequency"]

"""SQLModel table exports."""

from .habit import Completion, FrequencyType, Habit

__all__ = [
    "Completion",
    "FrequencyType",
    "Habit",
]

"""Service module exports."""

from . import frequency, habits, streaks

__all__ = ["frequency", "habits", "streaks"]

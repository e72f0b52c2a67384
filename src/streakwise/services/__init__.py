"""Service module exports."""

from . import analytics, habits, streaks

__all__ = ["analytics", "habits", "streaks"]

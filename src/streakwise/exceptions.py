"""Application-specific error types."""

from __future__ import annotations


class StreakwiseError(Exception):
    """Base exception for all streakwise errors."""


class HabitNotFoundError(StreakwiseError):
    """Raised when a habit does not exist or belongs to another user."""


class InvalidHabitDataError(StreakwiseError, ValueError):
    """Raised when habit fields fail validation."""


class InvalidScheduleError(InvalidHabitDataError):
    """Raised when a scheduling rule carries invalid parameters."""


class DuplicateCompletionError(StreakwiseError):
    """Raised when a habit is already complete for the requested date."""


class CompletionNotFoundError(StreakwiseError):
    """Raised when removing a completion that was never recorded."""


__all__ = [
    "CompletionNotFoundError",
    "DuplicateCompletionError",
    "HabitNotFoundError",
    "InvalidHabitDataError",
    "InvalidScheduleError",
    "StreakwiseError",
]

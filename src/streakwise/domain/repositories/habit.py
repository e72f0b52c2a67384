"""Habit repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.habit import Habit, HabitCompletion


class HabitRepository(Protocol):
    """Supplies habits and their completion dates, scoped to one user."""

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_all(self, *, user_id: int, include_archived: bool = False) -> list[Habit]:
        """List habits, optionally including archived ones."""
        ...

    def list_active(self, *, user_id: int) -> list[Habit]:
        """List only non-archived habits."""
        ...

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        """Create a new habit."""
        ...

    def update(self, habit: Habit, *, user_id: int) -> Habit:
        """Update an existing habit."""
        ...

    def delete(self, habit_id: int, *, user_id: int) -> None:
        """Delete a habit and its completions."""
        ...

    # Completion operations
    def get_completion(
        self, habit_id: int, completed_on: date, *, user_id: int
    ) -> Optional[HabitCompletion]:
        """Get the completion recorded for a habit on a date."""
        ...

    def list_completion_dates(
        self,
        habit_id: int,
        *,
        user_id: int,
        start: date | None = None,
        end: date | None = None,
    ) -> list[date]:
        """Return completion dates for a habit, newest first."""
        ...

    def add_completion(self, completion: HabitCompletion, *, user_id: int) -> HabitCompletion:
        """Insert a completion."""
        ...

    def delete_completion(self, habit_id: int, completed_on: date, *, user_id: int) -> bool:
        """Delete a completion; return False when none existed."""
        ...

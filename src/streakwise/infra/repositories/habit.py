"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from datetime import date
from typing import Callable, ContextManager, Optional

from sqlmodel import Session, select

from ...models.habit import Habit, HabitCompletion


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def _owned_habit(self, session: Session, habit_id: int, user_id: int) -> Optional[Habit]:
        return session.exec(
            select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
        ).first()

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = self._owned_habit(session, habit_id, user_id)
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int, include_archived: bool = False) -> list[Habit]:
        """List habits ordered by creation time."""
        with self.session_factory() as session:
            statement = (
                select(Habit)
                .where(Habit.user_id == user_id)
                .order_by(Habit.created_at, Habit.id)  # type: ignore
            )
            if not include_archived:
                statement = statement.where(Habit.archived == False)  # noqa: E712

            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_active(self, *, user_id: int) -> list[Habit]:
        """List only non-archived habits."""
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
            merged = session.merge(habit)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete(self, habit_id: int, *, user_id: int) -> None:
        """Delete a habit and its completions."""
        with self.session_factory() as session:
            habit = self._owned_habit(session, habit_id, user_id)
            if habit:
                session.delete(habit)
                session.commit()

    # Completion operations
    def get_completion(
        self, habit_id: int, completed_on: date, *, user_id: int
    ) -> Optional[HabitCompletion]:
        """Get the completion recorded for a habit on a date."""
        with self.session_factory() as session:
            statement = (
                select(HabitCompletion)
                .join(Habit)
                .where(Habit.user_id == user_id)
                .where(HabitCompletion.habit_id == habit_id)
                .where(HabitCompletion.completed_on == completed_on)
            )
            obj = session.exec(statement).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_completion_dates(
        self,
        habit_id: int,
        *,
        user_id: int,
        start: date | None = None,
        end: date | None = None,
    ) -> list[date]:
        """Return completion dates for a habit, newest first."""
        with self.session_factory() as session:
            statement = (
                select(HabitCompletion.completed_on)
                .join(Habit)
                .where(Habit.user_id == user_id)
                .where(HabitCompletion.habit_id == habit_id)
            )
            if start is not None:
                statement = statement.where(HabitCompletion.completed_on >= start)
            if end is not None:
                statement = statement.where(HabitCompletion.completed_on <= end)
            statement = statement.order_by(HabitCompletion.completed_on.desc())  # type: ignore
            return list(session.exec(statement).all())

    def add_completion(self, completion: HabitCompletion, *, user_id: int) -> HabitCompletion:
        """Insert a completion for a habit owned by ``user_id``."""
        with self.session_factory() as session:
            if self._owned_habit(session, completion.habit_id, user_id) is None:
                raise LookupError(f"Habit {completion.habit_id} not found for user {user_id}")
            session.add(completion)
            session.commit()
            session.refresh(completion)
            session.expunge(completion)
            return completion

    def delete_completion(self, habit_id: int, completed_on: date, *, user_id: int) -> bool:
        """Delete a completion; return False when none existed."""
        with self.session_factory() as session:
            completion = session.exec(
                select(HabitCompletion)
                .join(Habit)
                .where(Habit.user_id == user_id)
                .where(HabitCompletion.habit_id == habit_id)
                .where(HabitCompletion.completed_on == completed_on)
            ).first()

            if completion is None:
                return False
            session.delete(completion)
            session.commit()
            return True


__all__ = ["SQLModelHabitRepository"]

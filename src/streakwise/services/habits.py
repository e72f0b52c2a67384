"""Habit creation validation and completion use cases."""

from __future__ import annotations

import re
from datetime import date, datetime, timezone, tzinfo
from typing import Iterable, Optional

from ..domain.repositories.habit import HabitRepository
from ..exceptions import (
    CompletionNotFoundError,
    DuplicateCompletionError,
    HabitNotFoundError,
    InvalidHabitDataError,
    InvalidScheduleError,
)
from ..logging_config import get_logger
from ..models.habit import (
    DEFAULT_COLOR,
    FREQUENCY_CUSTOM,
    FREQUENCY_DAILY,
    FREQUENCY_INTERVAL,
    FREQUENCY_WEEKLY,
    Habit,
    HabitCompletion,
)
from .streaks import CustomDays, Daily, Interval, SchedulingRule, Weekly, to_civil_date

logger = get_logger(__name__)

_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
MAX_NAME_LENGTH = 100
MAX_TEXT_LENGTH = 500


def _parse_days(raw: str) -> frozenset[int]:
    return frozenset(int(part) for part in raw.split(",") if part.strip())


def _format_days(days: Iterable[int]) -> str:
    return ",".join(str(d) for d in sorted(set(days)))


def rule_for_habit(habit: Habit) -> SchedulingRule:
    """Build the scheduling rule stored on a habit row."""

    if habit.frequency == FREQUENCY_WEEKLY:
        return Weekly(target_per_week=habit.target_per_week or 1)
    if habit.frequency == FREQUENCY_CUSTOM:
        return CustomDays(days=_parse_days(habit.custom_days))
    if habit.frequency == FREQUENCY_INTERVAL:
        return Interval(every_n_days=habit.interval_days or 2)
    return Daily()


def apply_rule(habit: Habit, rule: SchedulingRule) -> Habit:
    """Write ``rule`` onto the habit columns, clearing parameters of other kinds."""

    habit.custom_days = ""
    habit.target_per_week = None
    habit.interval_days = None
    if isinstance(rule, Weekly):
        habit.frequency = FREQUENCY_WEEKLY
        habit.target_per_week = rule.target_per_week
    elif isinstance(rule, CustomDays):
        habit.frequency = FREQUENCY_CUSTOM
        habit.custom_days = _format_days(rule.days)
    elif isinstance(rule, Interval):
        habit.frequency = FREQUENCY_INTERVAL
        habit.interval_days = rule.every_n_days
    else:
        habit.frequency = FREQUENCY_DAILY
    return habit


def validate_rule(rule: SchedulingRule) -> SchedulingRule:
    """Reject rules whose parameters the engine cannot work with."""

    if isinstance(rule, Daily):
        return rule
    if isinstance(rule, Weekly):
        if not 1 <= rule.target_per_week <= 7:
            raise InvalidScheduleError("Weekly target must be between 1 and 7.")
        return rule
    if isinstance(rule, CustomDays):
        if not rule.days:
            raise InvalidScheduleError("Custom schedule needs at least one weekday.")
        if any(not 0 <= d <= 6 for d in rule.days):
            raise InvalidScheduleError("Weekdays must be between 0 (Sunday) and 6 (Saturday).")
        return rule
    if isinstance(rule, Interval):
        if rule.every_n_days < 2:
            raise InvalidScheduleError("Interval must be at least 2 days.")
        return rule
    raise InvalidScheduleError(f"Unknown scheduling rule: {rule!r}")


def _validate_fields(name: str, description: Optional[str], color: str) -> str:
    name = (name or "").strip()
    if not name or len(name) > MAX_NAME_LENGTH:
        raise InvalidHabitDataError(f"Name must be 1-{MAX_NAME_LENGTH} characters.")
    if description is not None and len(description) > MAX_TEXT_LENGTH:
        raise InvalidHabitDataError(f"Description must be at most {MAX_TEXT_LENGTH} characters.")
    if not _COLOR_RE.match(color or ""):
        raise InvalidHabitDataError("Color must be a #RRGGBB hex value.")
    return name


def creation_date(habit: Habit, tz: tzinfo | None = None) -> date:
    """Return the civil date the habit was created on in ``tz``.

    SQLite hands back naive datetimes; they were stored as UTC.
    """

    created_at = habit.created_at
    if isinstance(created_at, datetime) and created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return to_civil_date(created_at, tz)


def create_habit(
    repo: HabitRepository,
    *,
    user_id: int,
    name: str,
    rule: SchedulingRule | None = None,
    description: Optional[str] = None,
    color: str = DEFAULT_COLOR,
    created_at: datetime | None = None,
) -> Habit:
    """Validate and persist a new habit."""

    rule = validate_rule(rule or Daily())
    name = _validate_fields(name, description, color)
    habit = Habit(user_id=user_id, name=name, description=description, color=color)
    if created_at is not None:
        habit.created_at = created_at
    apply_rule(habit, rule)
    created = repo.create(habit, user_id=user_id)
    logger.info(
        "Habit created",
        extra={"habit_id": created.id, "user_id": user_id, "frequency": created.frequency},
    )
    return created


def get_habit(repo: HabitRepository, habit_id: int, *, user_id: int) -> Habit:
    habit = repo.get_by_id(habit_id, user_id=user_id)
    if habit is None:
        raise HabitNotFoundError(f"Habit {habit_id} not found")
    return habit


def update_habit(
    repo: HabitRepository,
    habit_id: int,
    *,
    user_id: int,
    name: Optional[str] = None,
    description: Optional[str] = None,
    color: Optional[str] = None,
    rule: SchedulingRule | None = None,
    archived: Optional[bool] = None,
) -> Habit:
    """Apply the given changes. A new rule replaces the old one outright."""

    habit = get_habit(repo, habit_id, user_id=user_id)
    new_name = habit.name if name is None else name
    new_description = habit.description if description is None else description
    new_color = habit.color if color is None else color
    habit.name = _validate_fields(new_name, new_description, new_color)
    habit.description = new_description
    habit.color = new_color
    if rule is not None:
        apply_rule(habit, validate_rule(rule))
    if archived is not None:
        habit.archived = archived
    return repo.update(habit, user_id=user_id)


def archive_habit(repo: HabitRepository, habit_id: int, *, user_id: int) -> Habit:
    return update_habit(repo, habit_id, user_id=user_id, archived=True)


def mark_complete(
    repo: HabitRepository,
    habit_id: int,
    completed_on: date,
    *,
    user_id: int,
    note: Optional[str] = None,
) -> HabitCompletion:
    """Record a completion; one per habit per day."""

    get_habit(repo, habit_id, user_id=user_id)
    if note is not None and len(note) > MAX_TEXT_LENGTH:
        raise InvalidHabitDataError(f"Note must be at most {MAX_TEXT_LENGTH} characters.")
    if repo.get_completion(habit_id, completed_on, user_id=user_id) is not None:
        raise DuplicateCompletionError(
            f"Habit {habit_id} already completed on {completed_on.isoformat()}"
        )
    completion = repo.add_completion(
        HabitCompletion(habit_id=habit_id, completed_on=completed_on, note=note),
        user_id=user_id,
    )
    logger.debug(
        "Completion recorded",
        extra={"habit_id": habit_id, "completed_on": completed_on.isoformat()},
    )
    return completion


def unmark_complete(
    repo: HabitRepository, habit_id: int, completed_on: date, *, user_id: int
) -> None:
    get_habit(repo, habit_id, user_id=user_id)
    if not repo.delete_completion(habit_id, completed_on, user_id=user_id):
        raise CompletionNotFoundError(
            f"No completion for habit {habit_id} on {completed_on.isoformat()}"
        )


def toggle_completion(
    repo: HabitRepository,
    habit_id: int,
    completed_on: date,
    *,
    user_id: int,
    note: Optional[str] = None,
) -> bool:
    """Flip the completion state for a day and return the new state."""

    get_habit(repo, habit_id, user_id=user_id)
    if repo.delete_completion(habit_id, completed_on, user_id=user_id):
        return False
    mark_complete(repo, habit_id, completed_on, user_id=user_id, note=note)
    return True


__all__ = [
    "apply_rule",
    "archive_habit",
    "create_habit",
    "creation_date",
    "get_habit",
    "mark_complete",
    "rule_for_habit",
    "toggle_completion",
    "unmark_complete",
    "update_habit",
    "validate_rule",
]

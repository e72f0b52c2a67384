"""Analytics views built on the streak engine: overview, per-habit and calendar."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from ..clock import Clock
from ..config import BaseConfig
from ..domain.repositories.habit import HabitRepository
from ..logging_config import get_logger
from .habits import creation_date, get_habit, rule_for_habit
from .streaks import (
    CalendarDay,
    HabitHistograms,
    HabitRef,
    aggregate_calendar,
    compute_completion_rate,
    compute_histograms,
    compute_streak,
    mean_rate,
)

logger = get_logger(__name__)

TOP_STREAKS = 5


@dataclass(slots=True)
class HabitStreak:
    habit_id: int
    habit_name: str
    streak: int


@dataclass(slots=True)
class OverviewStats:
    total_habits: int
    active_habits: int
    completed_today: int
    overall_completion_rate: int
    current_streaks: list[HabitStreak]


@dataclass(slots=True)
class HabitAnalytics:
    habit_id: int
    current_streak: int
    longest_streak: int
    completion_rate: int
    histograms: HabitHistograms


def overview_stats(repo: HabitRepository, *, user_id: int, clock: Clock) -> OverviewStats:
    """Summarize a user's active habits as of ``clock.today()``."""

    today = clock.today()
    habits = repo.list_active(user_id=user_id)

    completed_today = 0
    rates: list[int] = []
    streaks: list[HabitStreak] = []
    for habit in habits:
        dates = repo.list_completion_dates(habit.id, user_id=user_id)
        rule = rule_for_habit(habit)
        if today in dates:
            completed_today += 1
        rates.append(
            compute_completion_rate(rule, dates, creation_date(habit, clock.tzinfo), today)
        )
        current = compute_streak(rule, dates, today).current
        if current > 0:
            streaks.append(HabitStreak(habit_id=habit.id, habit_name=habit.name, streak=current))

    streaks.sort(key=lambda s: s.streak, reverse=True)
    stats = OverviewStats(
        total_habits=len(habits),
        active_habits=sum(1 for h in habits if not h.archived),
        completed_today=completed_today,
        overall_completion_rate=mean_rate(rates),
        current_streaks=streaks[:TOP_STREAKS],
    )
    logger.debug(
        "Overview computed",
        extra={"user_id": user_id, "habits": stats.total_habits, "rate": stats.overall_completion_rate},
    )
    return stats


def habit_analytics(
    repo: HabitRepository, habit_id: int, *, user_id: int, clock: Clock
) -> HabitAnalytics:
    """Streaks, completion rate and histograms for one habit.

    Raises:
        HabitNotFoundError: the habit does not exist for ``user_id``.
    """

    habit = get_habit(repo, habit_id, user_id=user_id)
    today = clock.today()
    dates = repo.list_completion_dates(habit_id, user_id=user_id)
    rule = rule_for_habit(habit)

    streak = compute_streak(rule, dates, today)
    rate = compute_completion_rate(rule, dates, creation_date(habit, clock.tzinfo), today)
    analytics = HabitAnalytics(
        habit_id=habit_id,
        current_streak=streak.current,
        longest_streak=streak.longest,
        completion_rate=rate,
        histograms=compute_histograms(dates, today),
    )
    logger.debug(
        "Habit analytics computed",
        extra={"habit_id": habit_id, "current": streak.current, "longest": streak.longest},
    )
    return analytics


def calendar(
    repo: HabitRepository,
    *,
    user_id: int,
    clock: Clock,
    start: date | None = None,
    end: date | None = None,
    lookback_days: int = BaseConfig.DEFAULT_CALENDAR_LOOKBACK_DAYS,
) -> list[CalendarDay]:
    """Heatmap of completions across active habits, defaulting to the trailing year."""

    today = clock.today()
    end = end or today
    start = start or today - timedelta(days=lookback_days)
    if start > end:
        return []

    sources = []
    for habit in repo.list_active(user_id=user_id):
        dates = repo.list_completion_dates(habit.id, user_id=user_id, start=start, end=end)
        sources.append((HabitRef(id=habit.id, name=habit.name, color=habit.color), dates))

    days = aggregate_calendar(sources, start=start, end=end)
    logger.debug(
        "Calendar aggregated",
        extra={"user_id": user_id, "start": start.isoformat(), "end": end.isoformat(), "days": len(days)},
    )
    return days


__all__ = [
    "HabitAnalytics",
    "HabitStreak",
    "OverviewStats",
    "calendar",
    "habit_analytics",
    "overview_stats",
]

"""Schedule-aware streak, completion-rate and histogram calculations.

Everything here is pure: callers pass the scheduling rule, the completion
dates and the reference "today", and get plain dataclasses back. Dates are
civil dates; all differences are taken as whole days via ``date`` subtraction.

Weekday numbers follow the Sunday-first convention (0 = Sunday ... 6 = Saturday)
used by stored ``CustomDays`` rules, so :func:`js_weekday` is used wherever a
weekday index is needed instead of :meth:`date.weekday`.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

HISTOGRAM_PERIODS = 12


@dataclass(frozen=True, slots=True)
class Daily:
    """Due every calendar day."""


@dataclass(frozen=True, slots=True)
class Weekly:
    """Due ``target_per_week`` times in each seven-day block."""

    target_per_week: int = 1


@dataclass(frozen=True, slots=True)
class CustomDays:
    """Due on the listed weekdays (0 = Sunday ... 6 = Saturday)."""

    days: frozenset[int] = field(default_factory=frozenset)


@dataclass(frozen=True, slots=True)
class Interval:
    """Due once every ``every_n_days`` days, starting on the creation day."""

    every_n_days: int = 2


SchedulingRule = Union[Daily, Weekly, CustomDays, Interval]


@dataclass(frozen=True, slots=True)
class StreakResult:
    current: int = 0
    longest: int = 0


@dataclass(frozen=True, slots=True)
class WeekBucket:
    week: str  # ISO date of the window start
    count: int


@dataclass(frozen=True, slots=True)
class MonthBucket:
    month: str  # YYYY-MM
    count: int


@dataclass(frozen=True, slots=True)
class HabitHistograms:
    by_weekday: list[int]
    by_week: list[WeekBucket]
    by_month: list[MonthBucket]


@dataclass(frozen=True, slots=True)
class HabitRef:
    """Identifying info shown next to a heatmap cell."""

    id: int
    name: str
    color: str


@dataclass(frozen=True, slots=True)
class CalendarDay:
    date: date
    count: int
    habits: list[HabitRef]


def js_weekday(value: date) -> int:
    """Return the Sunday-first weekday index (0 = Sunday ... 6 = Saturday)."""

    return value.isoweekday() % 7


def to_civil_date(value: date | datetime, tz: tzinfo | None = None) -> date:
    """Drop time-of-day, converting aware datetimes into ``tz`` first."""

    if isinstance(value, datetime):
        if tz is not None and value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    return value


def normalize_dates(values: Iterable[date | datetime], *, tz: tzinfo | None = None) -> list[date]:
    """Return unique civil dates sorted newest first."""

    return sorted({to_civil_date(v, tz) for v in values}, reverse=True)


def _half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# ---------------------------------------------------------------------------
# Streaks
# ---------------------------------------------------------------------------


def _segment_lengths(dates: list[date], tolerance: int) -> list[int]:
    """Split a newest-first date list into runs whose gaps are <= ``tolerance``.

    The first element of the result is the run containing the newest date.
    """

    if not dates:
        return []
    segments = [1]
    for newer, older in zip(dates, dates[1:]):
        if (newer - older).days <= tolerance:
            segments[-1] += 1
        else:
            segments.append(1)
    return segments


def _adjacency_streak(dates: list[date], today: date) -> StreakResult:
    longest = max(_segment_lengths(dates, tolerance=1))

    yesterday = today - timedelta(days=1)
    newest = dates[0]
    if newest != today and newest != yesterday:
        return StreakResult(current=0, longest=longest)

    present = set(dates)
    cursor = newest
    current = 0
    while cursor in present:
        current += 1
        cursor -= timedelta(days=1)
    return StreakResult(current=current, longest=longest)


def _interval_streak(dates: list[date], today: date, every_n_days: int) -> StreakResult:
    segments = _segment_lengths(dates, tolerance=every_n_days)
    longest = max(segments)
    active = (today - dates[0]).days <= every_n_days
    return StreakResult(current=segments[0] if active else 0, longest=longest)


def compute_streak(
    rule: SchedulingRule,
    completion_dates: Iterable[date | datetime],
    today: date,
    *,
    tz: tzinfo | None = None,
) -> StreakResult:
    """Return the current and longest streak for ``completion_dates``.

    Daily, weekly and custom-day habits need completions on consecutive
    calendar days; interval habits tolerate gaps of up to ``every_n_days``.
    """

    dates = normalize_dates(completion_dates, tz=tz)
    if not dates:
        return StreakResult()
    if isinstance(rule, Interval):
        return _interval_streak(dates, today, rule.every_n_days)
    return _adjacency_streak(dates, today)


# ---------------------------------------------------------------------------
# Completion rate
# ---------------------------------------------------------------------------


def _count_weekdays(start: date, end: date, weekdays: frozenset[int]) -> int:
    """Count days in [start, end] whose Sunday-first weekday is in ``weekdays``."""

    total_days = (end - start).days + 1
    if total_days <= 0 or not weekdays:
        return 0
    full_weeks, remainder = divmod(total_days, 7)
    count = full_weeks * len(weekdays & frozenset(range(7)))
    first = js_weekday(start)
    for offset in range(remainder):
        if (first + offset) % 7 in weekdays:
            count += 1
    return count


def expected_occurrences(rule: SchedulingRule, creation_date: date, today: date) -> int:
    """Return how many completions the rule expected from creation through today."""

    days_since_creation = (today - creation_date).days + 1
    if days_since_creation <= 0:
        return 0
    if isinstance(rule, Daily):
        return days_since_creation
    if isinstance(rule, Weekly):
        weeks = -(-days_since_creation // 7)
        return weeks * rule.target_per_week
    if isinstance(rule, CustomDays):
        return _count_weekdays(creation_date, today, rule.days)
    if isinstance(rule, Interval):
        return days_since_creation // rule.every_n_days + 1
    raise TypeError(f"Unsupported scheduling rule: {rule!r}")


def compute_completion_rate(
    rule: SchedulingRule,
    completion_dates: Iterable[date | datetime],
    creation_date: date | datetime,
    today: date,
    *,
    tz: tzinfo | None = None,
) -> int:
    """Return completions / expected occurrences as a percentage in [0, 100].

    Completions recorded before the creation date still count; the result is
    capped at 100 rather than rewarding catch-up entries.
    """

    created_on = to_civil_date(creation_date, tz)
    expected = expected_occurrences(rule, created_on, today)
    if expected <= 0:
        return 0
    completed = len(normalize_dates(completion_dates, tz=tz))
    if completed == 0:
        return 0
    ratio = Decimal(100 * completed) / Decimal(expected)
    return min(100, _half_up(ratio))


def mean_rate(rates: Iterable[int]) -> int:
    """Half-up mean of several completion rates; 0 for no rates."""

    values = list(rates)
    if not values:
        return 0
    return _half_up(Decimal(sum(values)) / Decimal(len(values)))


# ---------------------------------------------------------------------------
# Histograms
# ---------------------------------------------------------------------------


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def compute_histograms(
    completion_dates: Iterable[date | datetime],
    today: date,
    *,
    tz: tzinfo | None = None,
) -> HabitHistograms:
    """Bucket completions by weekday, by the last 12 weeks and by the last 12 months.

    Every supplied completion is counted, duplicates included.
    """

    days = [to_civil_date(v, tz) for v in completion_dates]

    by_weekday = [0] * 7
    for day in days:
        by_weekday[js_weekday(day)] += 1

    per_day = Counter(days)
    by_week: list[WeekBucket] = []
    anchor = js_weekday(today)
    for i in range(HISTOGRAM_PERIODS - 1, -1, -1):
        week_start = today - timedelta(days=i * 7 + anchor)
        week_end = week_start + timedelta(days=6)
        count = sum(n for day, n in per_day.items() if week_start <= day <= week_end)
        by_week.append(WeekBucket(week=week_start.isoformat(), count=count))

    per_month = Counter((day.year, day.month) for day in days)
    by_month: list[MonthBucket] = []
    for i in range(HISTOGRAM_PERIODS - 1, -1, -1):
        year, month = _shift_month(today.year, today.month, -i)
        by_month.append(
            MonthBucket(month=f"{year:04d}-{month:02d}", count=per_month.get((year, month), 0))
        )

    return HabitHistograms(by_weekday=by_weekday, by_week=by_week, by_month=by_month)


def aggregate_calendar(
    habits: Iterable[tuple[HabitRef, Iterable[date | datetime]]],
    *,
    start: date,
    end: date,
    tz: tzinfo | None = None,
) -> list[CalendarDay]:
    """Group completions across habits by date for a heatmap, oldest date first."""

    grouped: dict[date, list[HabitRef]] = {}
    for ref, completions in habits:
        for day in normalize_dates(completions, tz=tz):
            if start <= day <= end:
                grouped.setdefault(day, []).append(ref)

    return [
        CalendarDay(date=day, count=len(refs), habits=refs)
        for day, refs in sorted(grouped.items())
    ]


__all__ = [
    "CalendarDay",
    "CustomDays",
    "Daily",
    "HabitHistograms",
    "HabitRef",
    "Interval",
    "MonthBucket",
    "SchedulingRule",
    "StreakResult",
    "WeekBucket",
    "Weekly",
    "aggregate_calendar",
    "compute_completion_rate",
    "compute_histograms",
    "compute_streak",
    "expected_occurrences",
    "js_weekday",
    "mean_rate",
    "normalize_dates",
    "to_civil_date",
]

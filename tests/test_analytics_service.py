"""End-to-end analytics over persisted habits with a fixed clock."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from streakwise.clock import FixedClock
from streakwise.exceptions import HabitNotFoundError
from streakwise.services import analytics
from streakwise.services.streaks import Interval, Weekly

TODAY = date(2024, 3, 13)


def days_ago(*offsets: int) -> list[date]:
    return [TODAY - timedelta(days=n) for n in offsets]


class TestOverview:
    def test_no_habits(self, repo, user, clock):
        stats = analytics.overview_stats(repo, user_id=user.id, clock=clock)

        assert stats.total_habits == 0
        assert stats.completed_today == 0
        assert stats.overall_completion_rate == 0
        assert stats.current_streaks == []

    def test_summary(self, repo, user, clock, habit_factory, complete):
        run = habit_factory(name="Run", created_on=TODAY - timedelta(days=9))
        read = habit_factory(name="Read", created_on=TODAY - timedelta(days=3))
        idle = habit_factory(name="Idle", created_on=TODAY - timedelta(days=3))
        habit_factory(name="Archived", archived=True)
        complete(run, *days_ago(0, 1, 2, 3, 4))
        complete(read, *days_ago(1, 2, 3))

        stats = analytics.overview_stats(repo, user_id=user.id, clock=clock)

        assert stats.total_habits == 3
        assert stats.active_habits == 3
        assert stats.completed_today == 1
        # run 50%, read 75%, idle 0%
        assert stats.overall_completion_rate == 42
        assert [(s.habit_name, s.streak) for s in stats.current_streaks] == [("Run", 5), ("Read", 3)]
        assert idle.id not in {s.habit_id for s in stats.current_streaks}

    def test_top_five_streaks_only(self, repo, user, clock, habit_factory, complete):
        for n in range(1, 8):
            habit = habit_factory(name=f"H{n}")
            complete(habit, *days_ago(*range(n)))

        stats = analytics.overview_stats(repo, user_id=user.id, clock=clock)

        assert [s.streak for s in stats.current_streaks] == [7, 6, 5, 4, 3]


class TestHabitAnalytics:
    def test_weekly_habit(self, repo, user, clock, habit_factory, complete):
        habit = habit_factory(rule=Weekly(target_per_week=3), created_on=TODAY - timedelta(days=13))
        complete(habit, *days_ago(0, 1, 4, 7, 9))

        result = analytics.habit_analytics(repo, habit.id, user_id=user.id, clock=clock)

        assert result.current_streak == 2
        assert result.longest_streak == 2
        assert result.completion_rate == 83
        assert sum(result.histograms.by_weekday) == 5
        assert result.histograms.by_month[-1].month == "2024-03"

    def test_interval_habit(self, repo, user, clock, habit_factory, complete):
        habit = habit_factory(rule=Interval(every_n_days=3), created_on=TODAY - timedelta(days=6))
        complete(habit, *days_ago(0, 3, 6))

        result = analytics.habit_analytics(repo, habit.id, user_id=user.id, clock=clock)

        assert (result.current_streak, result.longest_streak) == (3, 3)
        assert result.completion_rate == 100

    def test_clock_timezone_moves_creation_date(self, repo, user, habit_factory, complete):
        # created at noon UTC; in Pacific/Kiritimati (UTC+14) that is already the next day
        habit = habit_factory(created_on=TODAY - timedelta(days=1))
        complete(habit, TODAY)
        kiritimati = FixedClock(TODAY, "Pacific/Kiritimati")

        result = analytics.habit_analytics(repo, habit.id, user_id=user.id, clock=kiritimati)

        assert result.completion_rate == 100

    def test_unknown_habit(self, repo, user, clock):
        with pytest.raises(HabitNotFoundError):
            analytics.habit_analytics(repo, 12345, user_id=user.id, clock=clock)


class TestCalendar:
    def test_default_range_is_trailing_year(self, repo, user, clock, habit_factory, complete):
        habit = habit_factory(name="Run", color="#ff0000")
        complete(habit, *days_ago(0, 365, 366))

        days = analytics.calendar(repo, user_id=user.id, clock=clock)

        assert [d.date for d in days] == days_ago(365, 0)
        assert days[0].habits[0].name == "Run"
        assert days[0].habits[0].color == "#ff0000"

    def test_explicit_range_and_archived_excluded(self, repo, user, clock, habit_factory, complete):
        run = habit_factory(name="Run")
        read = habit_factory(name="Read")
        old = habit_factory(name="Old", archived=True)
        complete(run, *days_ago(1, 2, 10))
        complete(read, *days_ago(2))
        complete(old, *days_ago(2))

        days = analytics.calendar(
            repo, user_id=user.id, clock=clock, start=TODAY - timedelta(days=5), end=TODAY
        )

        assert [(d.date, d.count) for d in days] == [(TODAY - timedelta(days=2), 2), (TODAY - timedelta(days=1), 1)]
        assert {h.name for h in days[0].habits} == {"Run", "Read"}

    def test_inverted_range_is_empty(self, repo, user, clock):
        assert analytics.calendar(repo, user_id=user.id, clock=clock, start=TODAY, end=TODAY - timedelta(days=1)) == []

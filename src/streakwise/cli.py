"""Command line entry points for Streakwise."""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import date

import click

from .clock import SystemClock
from .config import BaseConfig
from .exceptions import HabitNotFoundError
from .infra.database import bootstrap_database
from .infra.repositories import SQLModelHabitRepository
from .logging_config import setup_logging
from .services import analytics


def _echo_json(payload) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


@click.group()
@click.pass_context
def main(ctx: click.Context) -> None:
    """Habit streak and completion analytics."""

    config = BaseConfig()
    setup_logging(config)
    _, session_factory = bootstrap_database(config)
    ctx.obj = {
        "config": config,
        "repo": SQLModelHabitRepository(session_factory),
        "clock": SystemClock(config.TIMEZONE),
    }


@main.command("init-db")
@click.pass_obj
def init_db(obj: dict) -> None:
    """Create database tables."""

    click.echo(f"Database ready: {obj['config'].DATABASE_URL}")


@main.command("overview")
@click.option("--user-id", type=int, required=True)
@click.pass_obj
def overview(obj: dict, user_id: int) -> None:
    """Print overview stats for a user's active habits."""

    stats = analytics.overview_stats(obj["repo"], user_id=user_id, clock=obj["clock"])
    _echo_json(asdict(stats))


@main.command("habit-stats")
@click.argument("habit_id", type=int)
@click.option("--user-id", type=int, required=True)
@click.pass_obj
def habit_stats(obj: dict, habit_id: int, user_id: int) -> None:
    """Print streaks, completion rate and histograms for one habit."""

    try:
        result = analytics.habit_analytics(
            obj["repo"], habit_id, user_id=user_id, clock=obj["clock"]
        )
    except HabitNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    _echo_json(asdict(result))


@main.command("calendar")
@click.option("--user-id", type=int, required=True)
@click.option("--start", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option("--end", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.pass_obj
def calendar(obj: dict, user_id: int, start, end) -> None:
    """Print heatmap days across a user's active habits."""

    start_day: date | None = start.date() if start else None
    end_day: date | None = end.date() if end else None
    days = analytics.calendar(
        obj["repo"],
        user_id=user_id,
        clock=obj["clock"],
        start=start_day,
        end=end_day,
        lookback_days=obj["config"].CALENDAR_LOOKBACK_DAYS,
    )
    _echo_json([asdict(day) for day in days])


if __name__ == "__main__":  # pragma: no cover
    main()

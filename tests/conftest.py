"""Pytest configuration and shared fixtures for Streakwise tests.

Database fixtures build an isolated SQLite file per test; factories persist
habits and completions with sensible defaults so tests only spell out what
they assert on.
"""

from __future__ import annotations

import logging
import tempfile
from datetime import date, datetime, time, timezone
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine, select

from streakwise.clock import FixedClock
from streakwise.infra.database import create_session_factory
from streakwise.infra.repositories import SQLModelHabitRepository
from streakwise.models import Habit, HabitCompletion, User
from streakwise.services.habits import apply_rule
from streakwise.services.streaks import Daily, SchedulingRule

# Wednesday; js weekday 3
TODAY = date(2024, 3, 13)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Session for arranging test data directly."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Transactional session factory, as used by the application."""
    return create_session_factory(db_engine)


@pytest.fixture
def repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(TODAY)


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Drop handlers installed by setup_logging so tests do not leak file handles."""
    yield
    logger = logging.getLogger("streakwise")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user_factory(db_session):
    def _create_user(email: str = "tester@example.com", name: str = "Tester") -> User:
        existing = db_session.exec(select(User).where(User.email == email)).first()
        if existing:
            return existing
        u = User(email=email, name=name, password_hash="dummy-hash")
        db_session.add(u)
        db_session.commit()
        db_session.refresh(u)
        return u

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    """Default user for scoping data."""
    return user_factory()


@pytest.fixture
def habit_factory(db_session, user):
    """Factory for creating test habits.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(
        name: str = "Test Habit",
        rule: SchedulingRule | None = None,
        created_on: date = TODAY,
        color: str = "#22c55e",
        archived: bool = False,
        owner: User | None = None,
    ) -> Habit:
        """Create a habit created at noon UTC on ``created_on``."""
        owner = owner or user
        habit = Habit(
            user_id=owner.id,
            name=name,
            color=color,
            archived=archived,
            created_at=datetime.combine(created_on, time(12, 0), tzinfo=timezone.utc),
        )
        apply_rule(habit, rule or Daily())
        db_session.add(habit)
        db_session.commit()
        db_session.refresh(habit)
        return habit

    return _create_habit


@pytest.fixture
def complete(db_session):
    """Record completions for a habit on the given dates."""

    def _complete(habit: Habit, *days: date) -> None:
        for day in days:
            db_session.add(HabitCompletion(habit_id=habit.id, completed_on=day))
        db_session.commit()

    return _complete

"""Configuration loading from environment variables."""

from __future__ import annotations

import pytest

from streakwise import config as cfg
from streakwise.config import BaseConfig


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    monkeypatch.setenv("STREAKWISE_DATA_DIR", str(tmp_path))
    for name in (
        "STREAKWISE_DATABASE_URL",
        "STREAKWISE_TIMEZONE",
        "STREAKWISE_DEV_MODE",
        "STREAKWISE_CALENDAR_LOOKBACK_DAYS",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults(tmp_path):
    config = BaseConfig()

    assert config.DATA_DIR == tmp_path.resolve()
    assert config.TIMEZONE == "UTC"
    assert config.CALENDAR_LOOKBACK_DAYS == 365
    assert config.DEV_MODE is True
    assert config.DATABASE_URL == f"sqlite:///{tmp_path.resolve() / 'streakwise.db'}"
    assert config.sqlalchemy_engine_options() == {"connect_args": {"check_same_thread": False}}


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("STREAKWISE_TIMEZONE", "Europe/Berlin")
    monkeypatch.setenv("STREAKWISE_CALENDAR_LOOKBACK_DAYS", "90")
    monkeypatch.setenv("STREAKWISE_DEV_MODE", "off")
    monkeypatch.setenv("STREAKWISE_DATABASE_URL", "postgresql://localhost/habits")

    config = BaseConfig()

    assert config.TIMEZONE == "Europe/Berlin"
    assert config.CALENDAR_LOOKBACK_DAYS == 90
    assert config.DEV_MODE is False
    assert config.DATABASE_URL == "postgresql://localhost/habits"
    assert config.sqlalchemy_engine_options() == {}


def test_unknown_timezone_rejected(monkeypatch):
    monkeypatch.setenv("STREAKWISE_TIMEZONE", "Mars/Olympus_Mons")
    with pytest.raises(ValueError):
        BaseConfig()


@pytest.mark.parametrize("value", ["-1", "soon"])
def test_bad_lookback_rejected(monkeypatch, value):
    monkeypatch.setenv("STREAKWISE_CALENDAR_LOOKBACK_DAYS", value)
    with pytest.raises(ValueError):
        BaseConfig()


def test_testing_config_uses_memory_database():
    config = cfg.TestingConfig()
    assert config.TESTING is True
    assert config.DATABASE_URL == "sqlite://"

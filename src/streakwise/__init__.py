"""Streakwise habit analytics package."""

from __future__ import annotations

from .clock import FixedClock, SystemClock
from .config import BaseConfig, DevConfig, TestingConfig

__all__ = ["BaseConfig", "DevConfig", "FixedClock", "SystemClock", "TestingConfig"]

"""Reference clocks that decide which civil date is "today"."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    """Supplies today's civil date in a fixed reference timezone."""

    @property
    def tzinfo(self) -> tzinfo:  # pragma: no cover - interface
        ...

    def today(self) -> date:  # pragma: no cover - interface
        ...


class SystemClock:
    """Wall-clock time converted into the configured timezone."""

    def __init__(self, timezone_name: str = "UTC") -> None:
        self._tz = ZoneInfo(timezone_name)

    @property
    def tzinfo(self) -> tzinfo:
        return self._tz

    def now(self) -> datetime:
        return datetime.now(self._tz)

    def today(self) -> date:
        return self.now().date()


@dataclass(frozen=True, slots=True)
class FixedClock:
    """A clock pinned to one date, for reproducible computations."""

    day: date
    timezone_name: str = "UTC"
    _tz: ZoneInfo = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_tz", ZoneInfo(self.timezone_name))

    @property
    def tzinfo(self) -> tzinfo:
        return self._tz

    def today(self) -> date:
        return self.day

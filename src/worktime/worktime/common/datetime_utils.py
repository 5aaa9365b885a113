from __future__ import annotations

import math
from datetime import date, datetime, time
from typing import Callable

Clock = Callable[[], datetime]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse HH:MM (or HH:MM:SS) string into time."""
    v = value.strip()
    fmt = "%H:%M:%S" if v.count(":") == 2 else "%H:%M"
    return datetime.strptime(v, fmt).time()


def parse_iso_datetime(value: str) -> datetime:
    """Parse a naive local ISO timestamp; values with a UTC offset are rejected."""
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is not None:
        raise ValueError(f"Timestamp must not carry an offset: {value!r}")
    return parsed


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def seconds_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds()


def floor_minutes(start: datetime, end: datetime) -> int:
    return math.floor(seconds_between(start, end) / 60)


def round_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two instants, rounding half up."""
    return math.floor(seconds_between(start, end) / 60 + 0.5)


def format_duration(minutes: int) -> str:
    """Render minutes as e.g. '2h 05m' -> '2h 5m'."""
    minutes = max(0, int(minutes))
    return f"{minutes // 60}h {minutes % 60}m"

from __future__ import annotations

from datetime import datetime

import pytest


class MutableClock:
    """Injectable "now" provider that tests move forward by hand."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 8, 30, 0)


@pytest.fixture
def clock(fixed_now) -> MutableClock:
    return MutableClock(fixed_now)

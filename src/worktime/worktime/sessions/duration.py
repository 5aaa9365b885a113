from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from ..common.datetime_utils import round_minutes


class DurationPolicy(ABC):
    """Strategy Pattern: decide the frozen duration of a completed session."""

    @abstractmethod
    def final_minutes(self, *, started_at: datetime, ended_at: datetime) -> int:
        raise NotImplementedError


class WallClockDurationPolicy(DurationPolicy):
    """Counts the whole wall-clock interval, paused time included."""

    def final_minutes(self, *, started_at: datetime, ended_at: datetime) -> int:
        return max(0, round_minutes(started_at, ended_at))

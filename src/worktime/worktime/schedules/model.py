from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..core.constants import DEFAULT_BREAK_MINUTES
from ..core.enums import ScheduleState


@dataclass(frozen=True)
class ScheduleEntry:
    """Domain entity: a planned shift for a worker.

    Times are local wall-clock values. Nothing checks ``end_time > start_time``
    or overlap with other entries.
    """

    schedule_id: str
    worker_id: str
    shift_date: date
    start_time: time
    end_time: time
    break_minutes: int = DEFAULT_BREAK_MINUTES
    state: ScheduleState = ScheduleState.SCHEDULED
    note: Optional[str] = None

    @property
    def planned_minutes(self) -> int:
        """Shift length minus break; an end at or before the start wraps past midnight."""
        start = datetime.combine(self.shift_date, self.start_time)
        end = datetime.combine(self.shift_date, self.end_time)
        if end <= start:
            end += timedelta(days=1)
        minutes = int((end - start).total_seconds() // 60)
        return max(0, minutes - int(self.break_minutes))


@dataclass(frozen=True)
class ScheduleFilter:
    """Query options for listing schedule entries. Date bounds are inclusive."""

    worker_id: Optional[str] = None
    state: Optional[ScheduleState] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def matches(self, e: ScheduleEntry) -> bool:
        if self.worker_id is not None and e.worker_id != self.worker_id:
            return False
        if self.state is not None and e.state != self.state:
            return False
        if self.start_date is not None and e.shift_date < self.start_date:
            return False
        if self.end_date is not None and e.shift_date > self.end_date:
            return False
        return True

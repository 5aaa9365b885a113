from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import ScheduleState
from .model import ScheduleEntry, ScheduleFilter


class ScheduleRepository(Protocol):
    def get_by_id(self, schedule_id: str) -> Optional[ScheduleEntry]:
        raise NotImplementedError

    def create(self, entry: ScheduleEntry) -> ScheduleEntry:
        raise NotImplementedError

    def set_state(self, *, schedule_id: str, state: ScheduleState) -> bool:
        """Overwrite the state. Returns False when the id is unknown."""

        raise NotImplementedError

    def list_entries(self, schedule_filter: ScheduleFilter) -> Sequence[ScheduleEntry]:
        """Entries ordered by shift date, then start time."""

        raise NotImplementedError

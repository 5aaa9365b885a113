from __future__ import annotations

import threading
from dataclasses import replace
from typing import Optional, Sequence

from ..core.enums import ScheduleState
from .model import ScheduleEntry, ScheduleFilter
from .repository import ScheduleRepository


class InMemoryScheduleRepository(ScheduleRepository):
    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: dict[str, ScheduleEntry] = {}

    def get_by_id(self, schedule_id: str) -> Optional[ScheduleEntry]:
        return self._by_id.get(schedule_id)

    def create(self, entry: ScheduleEntry) -> ScheduleEntry:
        with self._lock:
            self._by_id[entry.schedule_id] = entry
        return entry

    def set_state(self, *, schedule_id: str, state: ScheduleState) -> bool:
        with self._lock:
            entry = self._by_id.get(schedule_id)
            if entry is None:
                return False
            self._by_id[schedule_id] = replace(entry, state=state)
            return True

    def list_entries(self, schedule_filter: ScheduleFilter) -> Sequence[ScheduleEntry]:
        with self._lock:
            items = [e for e in self._by_id.values() if schedule_filter.matches(e)]
        items.sort(key=lambda e: (e.shift_date, e.start_time))
        return items

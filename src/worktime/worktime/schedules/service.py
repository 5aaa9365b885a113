from __future__ import annotations

import logging
import uuid
from datetime import date, time
from typing import Optional, Sequence

from ..common.validators import optional_text, require_non_empty, require_non_negative
from ..core.constants import DEFAULT_BREAK_MINUTES
from ..core.enums import ScheduleState
from ..core.exceptions import NotFoundError, ValidationError
from .model import ScheduleEntry, ScheduleFilter
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


class ScheduleService:
    """Use cases: plan a shift, mark it completed or missed.

    Marking is a plain overwrite: any state may move to either terminal
    state again, last write wins. Schedules are not linked to clocked
    sessions beyond sharing a worker id.
    """

    def __init__(self, schedules: ScheduleRepository, *, default_break_minutes: int = DEFAULT_BREAK_MINUTES):
        self._schedules = schedules
        self._default_break = int(default_break_minutes)

    def create_schedule(
        self,
        worker_id: str,
        shift_date: date,
        start_time: time,
        end_time: time,
        break_minutes: Optional[int] = None,
        note: Optional[str] = None,
    ) -> ScheduleEntry:
        worker_id = require_non_empty(worker_id, "worker_id")
        if not isinstance(shift_date, date):
            raise ValidationError("shift_date is required")
        if not isinstance(start_time, time) or not isinstance(end_time, time):
            raise ValidationError("start_time and end_time are required")
        breaks = self._default_break if break_minutes is None else require_non_negative(break_minutes, "break_minutes")

        entry = ScheduleEntry(
            schedule_id=uuid.uuid4().hex,
            worker_id=worker_id,
            shift_date=shift_date,
            start_time=start_time,
            end_time=end_time,
            break_minutes=breaks,
            state=ScheduleState.SCHEDULED,
            note=optional_text(note),
        )
        created = self._schedules.create(entry)
        logger.info("schedule created id=%s worker=%s date=%s", created.schedule_id, worker_id, shift_date.isoformat())
        return created

    def mark_completed(self, schedule_id: str) -> ScheduleEntry:
        return self._mark(schedule_id, ScheduleState.COMPLETED)

    def mark_missed(self, schedule_id: str) -> ScheduleEntry:
        return self._mark(schedule_id, ScheduleState.MISSED)

    def get(self, schedule_id: str) -> ScheduleEntry:
        entry = self._schedules.get_by_id(schedule_id)
        if not entry:
            raise NotFoundError(f"Schedule {schedule_id} not found")
        return entry

    def list_schedules(self, schedule_filter: Optional[ScheduleFilter] = None) -> Sequence[ScheduleEntry]:
        return list(self._schedules.list_entries(schedule_filter or ScheduleFilter()))

    def _mark(self, schedule_id: str, state: ScheduleState) -> ScheduleEntry:
        if not self._schedules.set_state(schedule_id=schedule_id, state=state):
            logger.warning("mark %s rejected: schedule %s not found", state.value, schedule_id)
            raise NotFoundError(f"Schedule {schedule_id} not found")
        logger.info("schedule %s marked %s", schedule_id, state.value)
        return self.get(schedule_id)

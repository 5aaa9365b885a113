from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import format_duration
from ..core.constants import UNASSIGNED_PROJECT_NAME, UNKNOWN_PROJECT_NAME, UNKNOWN_WORKER_NAME
from ..reports.aggregator import display_elapsed_minutes
from ..schedules.model import ScheduleEntry
from ..sessions.model import TimeSession
from .repository import ProjectRoster, WorkerRoster

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimesheetRow:
    """Read-model for timesheet tables (session joined with roster names)."""

    session_id: str
    worker_id: str
    worker_name: str
    project_id: Optional[str]
    project_name: str
    task_id: Optional[str]
    date: str
    started_at: str
    ended_at: str
    minutes: int
    duration: str
    state: str
    note: str


class LookupService:
    """Read-only joins of sessions/schedules against the rosters.

    Ids are bare references and may point at removed workers or projects,
    so every lookup degrades to a sentinel name instead of raising.
    """

    def __init__(self, workers: WorkerRoster, projects: ProjectRoster):
        self._workers = workers
        self._projects = projects

    def resolve_worker_name(self, worker_id: Optional[str]) -> str:
        if not worker_id:
            return UNKNOWN_WORKER_NAME
        try:
            worker = self._workers.get_by_id(worker_id)
        except Exception:
            logger.exception("worker roster lookup failed for %s", worker_id)
            return UNKNOWN_WORKER_NAME
        if not worker:
            return UNKNOWN_WORKER_NAME
        return worker.display_name or UNKNOWN_WORKER_NAME

    def resolve_project_name(self, project_id: Optional[str]) -> str:
        if not project_id:
            return UNASSIGNED_PROJECT_NAME
        try:
            project = self._projects.get_by_id(project_id)
        except Exception:
            logger.exception("project roster lookup failed for %s", project_id)
            return UNKNOWN_PROJECT_NAME
        return project.name if project else UNKNOWN_PROJECT_NAME

    def worker_board(
        self, open_session_for: Callable[[str], Optional[TimeSession]], *, now: datetime
    ) -> list[dict]:
        """Active roster workers with their open session, if any."""
        rows: list[dict] = []
        for w in self._workers.list_active():
            s = open_session_for(w.worker_id)
            rows.append(
                {
                    "worker_id": w.worker_id,
                    "worker_name": w.display_name or UNKNOWN_WORKER_NAME,
                    "position": w.position,
                    "session_id": s.session_id if s else None,
                    "state": s.state.value if s else None,
                    "project_name": self.resolve_project_name(s.project_id) if s else None,
                    "elapsed_minutes": display_elapsed_minutes(s, now) if s else 0,
                }
            )
        return rows

    def timesheet(self, sessions: Sequence[TimeSession], *, now: datetime) -> list[TimesheetRow]:
        rows: list[TimesheetRow] = []
        for s in sessions:
            minutes = display_elapsed_minutes(s, now)
            rows.append(
                TimesheetRow(
                    session_id=s.session_id,
                    worker_id=s.worker_id,
                    worker_name=self.resolve_worker_name(s.worker_id),
                    project_id=s.project_id,
                    project_name=self.resolve_project_name(s.project_id),
                    task_id=s.task_id,
                    date=s.owner_date.strftime("%Y-%m-%d"),
                    started_at=s.started_at.strftime("%H:%M"),
                    ended_at=s.ended_at.strftime("%H:%M") if s.ended_at else "-",
                    minutes=minutes,
                    duration=format_duration(minutes),
                    state=s.state.value,
                    note=s.note or "",
                )
            )
        return rows

    def schedule_rows(self, entries: Sequence[ScheduleEntry]) -> list[dict]:
        return [
            {
                "schedule_id": e.schedule_id,
                "worker_id": e.worker_id,
                "worker_name": self.resolve_worker_name(e.worker_id),
                "shift_date": e.shift_date.strftime("%Y-%m-%d"),
                "shift": f"{e.start_time.strftime('%H:%M')}-{e.end_time.strftime('%H:%M')}",
                "break_minutes": e.break_minutes,
                "planned": format_duration(e.planned_minutes),
                "state": e.state.value,
                "note": e.note or "",
            }
            for e in entries
        ]

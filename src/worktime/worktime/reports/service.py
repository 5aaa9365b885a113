from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import Clock, format_duration, now_local
from ..rosters.lookup import LookupService
from ..sessions.model import SessionFilter
from ..sessions.repository import SessionRepository
from . import aggregator
from .aggregator import DailySummary, WeeklySummary


@dataclass(frozen=True)
class RollupReport:
    start: Optional[date]
    end: Optional[date]
    rows: list[dict]


class ReportService:
    """Summaries over the current session set.

    Reads a snapshot from the repository and the injected clock, then hands
    off to the pure functions in ``aggregator``.
    """

    def __init__(
        self,
        sessions: SessionRepository,
        lookup: LookupService,
        *,
        clock: Optional[Clock] = None,
    ):
        self._sessions = sessions
        self._lookup = lookup
        self._clock = clock or now_local

    def daily_summary(self, day: Optional[date] = None) -> DailySummary:
        now = self._clock()
        day = day or now.date()
        snapshot = self._sessions.list_sessions(SessionFilter(start_date=day, end_date=day))
        return aggregator.daily_summary(snapshot, day, now)

    def weekly_summary(self, reference_date: Optional[date] = None) -> WeeklySummary:
        now = self._clock()
        reference_date = reference_date or now.date()
        start, end = aggregator.week_window(reference_date)
        snapshot = self._sessions.list_sessions(SessionFilter(start_date=start, end_date=end))
        return aggregator.weekly_summary(snapshot, reference_date, now)

    def worker_rollup(self, *, start: Optional[date] = None, end: Optional[date] = None) -> RollupReport:
        snapshot = self._sessions.list_sessions(SessionFilter(start_date=start, end_date=end))
        rows = [
            {
                "worker_id": r.key,
                "worker_name": self._lookup.resolve_worker_name(r.key),
                "total_minutes": r.total_minutes,
                "total_hours": format_duration(r.total_minutes),
                "session_count": r.session_count,
            }
            for r in aggregator.totals_by_worker(snapshot, start=start, end=end)
        ]
        return RollupReport(start=start, end=end, rows=rows)

    def project_rollup(self, *, start: Optional[date] = None, end: Optional[date] = None) -> RollupReport:
        snapshot = self._sessions.list_sessions(SessionFilter(start_date=start, end_date=end))
        rows = [
            {
                "project_id": r.key,
                "project_name": self._lookup.resolve_project_name(r.key),
                "total_minutes": r.total_minutes,
                "total_hours": format_duration(r.total_minutes),
                "session_count": r.session_count,
            }
            for r in aggregator.totals_by_project(snapshot, start=start, end=end)
        ]
        return RollupReport(start=start, end=end, rows=rows)

    def completion_rate(self, *, start: Optional[date] = None, end: Optional[date] = None) -> int:
        snapshot = self._sessions.list_sessions(SessionFilter(start_date=start, end_date=end))
        return aggregator.completion_rate(snapshot)

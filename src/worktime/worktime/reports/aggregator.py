"""Time aggregation over a snapshot of sessions.

Everything here is a pure function of its arguments: ``now`` is always
passed in and nothing is cached, so callers may poll at any cadence.

Daily and weekly totals treat open sessions differently on purpose:
``daily_summary`` counts open sessions at their live elapsed time while
``weekly_summary`` only counts completed ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Optional

from ..common.datetime_utils import floor_minutes
from ..core.constants import WEEK_WINDOW_DAYS
from ..core.enums import SessionState
from ..sessions.model import TimeSession


@dataclass(frozen=True)
class DailySummary:
    date: date
    total_minutes: int
    distinct_active_workers: int
    completed_session_count: int


@dataclass(frozen=True)
class WeeklySummary:
    window_start: date
    window_end: date
    total_minutes: int
    completed_session_count: int
    average_minutes_per_day: float


@dataclass(frozen=True)
class RollupRow:
    key: Optional[str]
    total_minutes: int
    session_count: int


def elapsed_minutes(session: TimeSession, now: datetime) -> int:
    if session.state == SessionState.COMPLETED:
        return int(session.duration_minutes or 0)
    return max(0, floor_minutes(session.started_at, now))


def display_elapsed_minutes(session: TimeSession, now: datetime) -> int:
    """Elapsed time for a running timer display; paused timers stop at the pause instant."""
    if session.state == SessionState.PAUSED and session.paused_at is not None:
        return elapsed_minutes(session, min(now, session.paused_at))
    return elapsed_minutes(session, now)


def week_window(reference_date: date) -> tuple[date, date]:
    return reference_date - timedelta(days=WEEK_WINDOW_DAYS - 1), reference_date


def daily_summary(sessions: Iterable[TimeSession], day: date, now: datetime) -> DailySummary:
    todays = [s for s in sessions if s.owner_date == day]
    return DailySummary(
        date=day,
        total_minutes=sum(elapsed_minutes(s, now) for s in todays),
        distinct_active_workers=len({s.worker_id for s in todays if s.state != SessionState.COMPLETED}),
        completed_session_count=sum(1 for s in todays if s.state == SessionState.COMPLETED),
    )


def weekly_summary(sessions: Iterable[TimeSession], reference_date: date, now: datetime) -> WeeklySummary:
    # now is unused: open sessions never enter weekly totals.
    start, end = week_window(reference_date)
    completed = [s for s in sessions if s.state == SessionState.COMPLETED and start <= s.owner_date <= end]
    total = sum(int(s.duration_minutes or 0) for s in completed)
    return WeeklySummary(
        window_start=start,
        window_end=end,
        total_minutes=total,
        completed_session_count=len(completed),
        average_minutes_per_day=total / WEEK_WINDOW_DAYS,
    )


def _rollup(
    sessions: Iterable[TimeSession],
    key: Callable[[TimeSession], Optional[str]],
    start: Optional[date],
    end: Optional[date],
) -> list[RollupRow]:
    totals: dict[Optional[str], list[int]] = {}
    for s in sessions:
        if s.state != SessionState.COMPLETED:
            continue
        if start is not None and s.owner_date < start:
            continue
        if end is not None and s.owner_date > end:
            continue
        bucket = totals.setdefault(key(s), [0, 0])
        bucket[0] += int(s.duration_minutes or 0)
        bucket[1] += 1

    rows = [RollupRow(key=k, total_minutes=v[0], session_count=v[1]) for k, v in totals.items()]
    rows.sort(key=lambda r: (-r.total_minutes, r.key or ""))
    return rows


def totals_by_worker(
    sessions: Iterable[TimeSession], *, start: Optional[date] = None, end: Optional[date] = None
) -> list[RollupRow]:
    """Completed minutes per worker, largest first."""
    return _rollup(sessions, lambda s: s.worker_id, start, end)


def totals_by_project(
    sessions: Iterable[TimeSession], *, start: Optional[date] = None, end: Optional[date] = None
) -> list[RollupRow]:
    """Completed minutes per project; sessions without a project roll up under ``None``."""
    return _rollup(sessions, lambda s: s.project_id, start, end)


def completion_rate(sessions: Iterable[TimeSession]) -> int:
    """Share of completed sessions as a whole percentage, 0 when there are none."""
    items = list(sessions)
    if not items:
        return 0
    completed = sum(1 for s in items if s.state == SessionState.COMPLETED)
    return int(completed * 100 / len(items) + 0.5)

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import SessionState


# Allowed moves of the session state machine, keyed by command name.
TRANSITIONS: dict[str, tuple[frozenset[SessionState], SessionState]] = {
    "pause": (frozenset({SessionState.ACTIVE}), SessionState.PAUSED),
    "resume": (frozenset({SessionState.PAUSED}), SessionState.ACTIVE),
    "clock_out": (frozenset({SessionState.ACTIVE, SessionState.PAUSED}), SessionState.COMPLETED),
}


def can_transition(command: str, current: SessionState) -> bool:
    allowed, _ = TRANSITIONS[command]
    return current in allowed


def target_state(command: str) -> SessionState:
    return TRANSITIONS[command][1]


@dataclass(frozen=True)
class TimeSession:
    """Domain entity: one clocked work interval for a worker.

    ``owner_date`` is the calendar date of ``started_at`` and stays that way
    even when the session runs past midnight. ``paused_at`` is display-only
    and never feeds duration accounting.
    """

    session_id: str
    worker_id: str
    started_at: datetime
    state: SessionState = SessionState.ACTIVE
    project_id: Optional[str] = None
    task_id: Optional[str] = None
    note: Optional[str] = None
    ended_at: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    paused_at: Optional[datetime] = None
    owner_date: Optional[date] = None

    def __post_init__(self):
        if self.owner_date is None:
            object.__setattr__(self, "owner_date", self.started_at.date())

    @property
    def is_open(self) -> bool:
        return self.state.is_open

    @property
    def is_completed(self) -> bool:
        return self.state == SessionState.COMPLETED


@dataclass(frozen=True)
class SessionFilter:
    """Query options for listing sessions. Date bounds are inclusive."""

    worker_id: Optional[str] = None
    project_id: Optional[str] = None
    state: Optional[SessionState] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    limit: Optional[int] = None

    def matches(self, s: TimeSession) -> bool:
        if self.worker_id is not None and s.worker_id != self.worker_id:
            return False
        if self.project_id is not None and s.project_id != self.project_id:
            return False
        if self.state is not None and s.state != self.state:
            return False
        if self.start_date is not None and s.owner_date < self.start_date:
            return False
        if self.end_date is not None and s.owner_date > self.end_date:
            return False
        return True

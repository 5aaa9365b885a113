from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import Clock, now_local
from ..common.validators import optional_text, require_non_empty
from ..core.enums import SessionState
from ..core.exceptions import ConflictError, InvalidStateError, NotFoundError
from .duration import DurationPolicy, WallClockDurationPolicy
from .locks import WorkerLocks
from .model import SessionFilter, TimeSession, can_transition, target_state
from .repository import SessionRepository

logger = logging.getLogger(__name__)


def new_session_id() -> str:
    return uuid.uuid4().hex


def _whole_seconds(value: datetime) -> datetime:
    # DATETIME columns hold whole seconds; owner_date must match the stored start.
    return value.replace(microsecond=0)


class SessionRegistry:
    """Use cases: clock in, pause, resume, clock out.

    Sole writer of session state. Every command for a worker runs under that
    worker's lock and re-reads the stored session before writing, so a
    command either applies fully or raises before anything is stored.
    """

    def __init__(
        self,
        sessions: SessionRepository,
        *,
        clock: Optional[Clock] = None,
        duration_policy: Optional[DurationPolicy] = None,
        locks: Optional[WorkerLocks] = None,
    ):
        self._sessions = sessions
        self._clock = clock or now_local
        self._policy = duration_policy or WallClockDurationPolicy()
        self._locks = locks or WorkerLocks()

    def clock_in(
        self,
        worker_id: str,
        project_id: Optional[str] = None,
        task_id: Optional[str] = None,
        note: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> TimeSession:
        worker_id = require_non_empty(worker_id, "worker_id")
        started_at = _whole_seconds(now or self._clock())

        with self._locks.hold(worker_id):
            existing = self._sessions.get_open_for_worker(worker_id)
            if existing:
                logger.warning("clock_in rejected: worker=%s already has open session %s", worker_id, existing.session_id)
                raise ConflictError(f"Worker {worker_id} already has an open session")

            session = TimeSession(
                session_id=new_session_id(),
                worker_id=worker_id,
                project_id=optional_text(project_id),
                task_id=optional_text(task_id),
                note=optional_text(note),
                started_at=started_at,
                state=SessionState.ACTIVE,
            )
            created = self._sessions.create_open(session)

        logger.info("clock_in worker=%s session=%s at=%s", worker_id, created.session_id, started_at.isoformat())
        return created

    def pause(self, session_id: str, *, now: Optional[datetime] = None) -> TimeSession:
        at = _whole_seconds(now or self._clock())
        return self._transition(session_id, "pause", lambda s: replace(s, paused_at=at))

    def resume(self, session_id: str) -> TimeSession:
        return self._transition(session_id, "resume", lambda s: replace(s, paused_at=None))

    def clock_out(self, session_id: str, at: Optional[datetime] = None) -> TimeSession:
        ended_at = _whole_seconds(at or self._clock())

        def _complete(s: TimeSession) -> TimeSession:
            return replace(
                s,
                ended_at=ended_at,
                duration_minutes=self._policy.final_minutes(started_at=s.started_at, ended_at=ended_at),
                paused_at=None,
            )

        return self._transition(session_id, "clock_out", _complete)

    def active_session_for(self, worker_id: str) -> Optional[TimeSession]:
        return self._sessions.get_open_for_worker(worker_id)

    def get(self, session_id: str) -> TimeSession:
        session = self._sessions.get_by_id(session_id)
        if not session:
            raise NotFoundError(f"Session {session_id} not found")
        return session

    def list_sessions(self, session_filter: Optional[SessionFilter] = None) -> Sequence[TimeSession]:
        return list(self._sessions.list_sessions(session_filter or SessionFilter()))

    def _transition(self, session_id: str, command: str, apply) -> TimeSession:
        worker_id = self.get(session_id).worker_id

        with self._locks.hold(worker_id):
            current = self.get(session_id)
            if not can_transition(command, current.state):
                logger.warning("%s rejected: session=%s state=%s", command, session_id, current.state.value)
                raise InvalidStateError(f"Cannot {command.replace('_', ' ')} a session that is {current.state.value}")

            updated = replace(apply(current), state=target_state(command))
            if not self._sessions.save_transition(updated, expected_state=current.state):
                raise InvalidStateError(f"Session {session_id} was modified concurrently")

        logger.info("%s worker=%s session=%s state=%s", command, worker_id, session_id, updated.state.value)
        return updated

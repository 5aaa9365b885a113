from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import SessionState
from .model import SessionFilter, TimeSession


class SessionRepository(Protocol):
    """Durable store for time sessions.

    Implementations must make ``create_open`` atomic with respect to the
    "no open session for this worker" check, and ``save_transition`` a
    compare-and-set on the stored state.
    """

    def get_by_id(self, session_id: str) -> Optional[TimeSession]:
        raise NotImplementedError

    def get_open_for_worker(self, worker_id: str) -> Optional[TimeSession]:
        raise NotImplementedError

    def create_open(self, session: TimeSession) -> TimeSession:
        """Persist a new open session.

        Raises ConflictError if the worker already has one.
        """

        raise NotImplementedError

    def save_transition(self, session: TimeSession, *, expected_state: SessionState) -> bool:
        """Store ``session`` only if the stored state still equals ``expected_state``."""

        raise NotImplementedError

    def list_sessions(self, session_filter: SessionFilter) -> Sequence[TimeSession]:
        raise NotImplementedError

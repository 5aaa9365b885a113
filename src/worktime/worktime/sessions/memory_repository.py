from __future__ import annotations

import threading
from typing import Optional, Sequence

from ..core.enums import SessionState
from ..core.exceptions import ConflictError
from .model import SessionFilter, TimeSession
from .repository import SessionRepository


class InMemorySessionRepository(SessionRepository):
    """Process-local store with an open-session index keyed by worker."""

    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: dict[str, TimeSession] = {}
        self._open_by_worker: dict[str, str] = {}

    def get_by_id(self, session_id: str) -> Optional[TimeSession]:
        return self._by_id.get(session_id)

    def get_open_for_worker(self, worker_id: str) -> Optional[TimeSession]:
        session_id = self._open_by_worker.get(worker_id)
        if session_id is None:
            return None
        return self._by_id.get(session_id)

    def create_open(self, session: TimeSession) -> TimeSession:
        with self._lock:
            if session.worker_id in self._open_by_worker:
                raise ConflictError(f"Worker {session.worker_id} already has an open session")
            self._by_id[session.session_id] = session
            self._open_by_worker[session.worker_id] = session.session_id
            return session

    def save_transition(self, session: TimeSession, *, expected_state: SessionState) -> bool:
        with self._lock:
            current = self._by_id.get(session.session_id)
            if current is None or current.state != expected_state:
                return False
            self._by_id[session.session_id] = session
            if session.is_open:
                self._open_by_worker[session.worker_id] = session.session_id
            elif self._open_by_worker.get(session.worker_id) == session.session_id:
                del self._open_by_worker[session.worker_id]
            return True

    def list_sessions(self, session_filter: SessionFilter) -> Sequence[TimeSession]:
        with self._lock:
            items = [s for s in self._by_id.values() if session_filter.matches(s)]
        items.sort(key=lambda s: s.started_at, reverse=True)
        if session_filter.limit is not None:
            items = items[: int(session_filter.limit)]
        return items

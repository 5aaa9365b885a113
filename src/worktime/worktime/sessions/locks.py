from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class WorkerLocks:
    """One mutex per worker id, created on first use.

    Commands for the same worker run one at a time; different workers never
    wait on each other.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def _lock_for(self, worker_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(worker_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[worker_id] = lock
            return lock

    @contextmanager
    def hold(self, worker_id: str) -> Iterator[None]:
        lock = self._lock_for(worker_id)
        with lock:
            yield

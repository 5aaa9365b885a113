from __future__ import annotations

import threading
from datetime import datetime, timedelta

import pytest

from worktime.core.enums import SessionState
from worktime.core.exceptions import ConflictError
from worktime.sessions.memory_repository import InMemorySessionRepository
from worktime.sessions.model import SessionFilter, TimeSession
from worktime.sessions.registry import SessionRegistry


T0 = datetime(2026, 2, 2, 9, 0, 0)


def _race(fn, n: int):
    barrier = threading.Barrier(n)
    results: list[object] = []
    lock = threading.Lock()

    def run(i: int):
        barrier.wait()
        try:
            out = fn(i)
        except ConflictError as e:
            out = e
        with lock:
            results.append(out)

    threads = [threading.Thread(target=run, args=(i,)) for i in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return results


def test_racing_clock_ins_for_one_worker_yield_single_session():
    repo = InMemorySessionRepository()
    registry = SessionRegistry(repo, clock=lambda: T0)

    results = _race(lambda i: registry.clock_in("w1"), 12)

    created = [r for r in results if isinstance(r, TimeSession)]
    conflicts = [r for r in results if isinstance(r, ConflictError)]
    assert len(created) == 1
    assert len(conflicts) == 11
    assert len(registry.list_sessions(SessionFilter(worker_id="w1"))) == 1


def test_racing_clock_ins_for_different_workers_all_succeed():
    registry = SessionRegistry(InMemorySessionRepository(), clock=lambda: T0)

    results = _race(lambda i: registry.clock_in(f"w{i}"), 8)

    assert all(isinstance(r, TimeSession) for r in results)
    open_sessions = registry.list_sessions(SessionFilter(state=SessionState.ACTIVE))
    assert len({s.worker_id for s in open_sessions}) == 8


def test_store_rejects_second_open_session_without_registry():
    repo = InMemorySessionRepository()
    repo.create_open(TimeSession(session_id="a", worker_id="w1", started_at=T0))

    with pytest.raises(ConflictError):
        repo.create_open(TimeSession(session_id="b", worker_id="w1", started_at=T0))


def test_store_transition_is_compare_and_set():
    repo = InMemorySessionRepository()
    s = repo.create_open(TimeSession(session_id="a", worker_id="w1", started_at=T0))
    paused = TimeSession(session_id="a", worker_id="w1", started_at=T0, state=SessionState.PAUSED)

    assert repo.save_transition(paused, expected_state=SessionState.ACTIVE) is True
    assert repo.save_transition(paused, expected_state=SessionState.ACTIVE) is False
    assert repo.get_by_id(s.session_id).state == SessionState.PAUSED


def test_store_frees_worker_slot_on_completion():
    repo = InMemorySessionRepository()
    repo.create_open(TimeSession(session_id="a", worker_id="w1", started_at=T0))
    done = TimeSession(
        session_id="a",
        worker_id="w1",
        started_at=T0,
        state=SessionState.COMPLETED,
        ended_at=T0 + timedelta(minutes=5),
        duration_minutes=5,
    )

    repo.save_transition(done, expected_state=SessionState.ACTIVE)

    assert repo.get_open_for_worker("w1") is None
    repo.create_open(TimeSession(session_id="b", worker_id="w1", started_at=T0 + timedelta(minutes=10)))
    assert repo.get_open_for_worker("w1").session_id == "b"

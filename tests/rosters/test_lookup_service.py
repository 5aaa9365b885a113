from __future__ import annotations

from datetime import date, datetime, time, timedelta

from worktime.core.enums import SessionState, WorkerStatus
from worktime.rosters.lookup import LookupService
from worktime.rosters.memory_roster import InMemoryProjectRoster, InMemoryWorkerRoster
from worktime.rosters.model import Project, Worker
from worktime.schedules.model import ScheduleEntry
from worktime.sessions.model import TimeSession


class BrokenRoster:
    def get_by_id(self, _id):
        raise RuntimeError("roster offline")

    def list_active(self):
        return []


def _lookup() -> LookupService:
    return LookupService(
        InMemoryWorkerRoster([Worker(worker_id="w1", first_name="Ana", last_name="Silva")]),
        InMemoryProjectRoster([Project(project_id="p1", name="Warehouse move")]),
    )


def test_resolve_known_names():
    lookup = _lookup()

    assert lookup.resolve_worker_name("w1") == "Ana Silva"
    assert lookup.resolve_project_name("p1") == "Warehouse move"


def test_unknown_ids_return_sentinels():
    lookup = _lookup()

    assert lookup.resolve_worker_name("ghost") == "Unknown Employee"
    assert lookup.resolve_worker_name(None) == "Unknown Employee"
    assert lookup.resolve_project_name("ghost") == "Unknown Project"
    assert lookup.resolve_project_name(None) == "Unassigned"


def test_removed_worker_degrades_to_sentinel():
    workers = InMemoryWorkerRoster([Worker(worker_id="w1", first_name="Ana")])
    lookup = LookupService(workers, InMemoryProjectRoster())
    assert lookup.resolve_worker_name("w1") == "Ana"

    workers.remove("w1")

    assert lookup.resolve_worker_name("w1") == "Unknown Employee"


def test_roster_failure_never_raises():
    lookup = LookupService(BrokenRoster(), BrokenRoster())

    assert lookup.resolve_worker_name("w1") == "Unknown Employee"
    assert lookup.resolve_project_name("p1") == "Unknown Project"


def test_timesheet_rows_join_names_and_format_durations():
    t0 = datetime(2026, 2, 2, 9, 0)
    sessions = [
        TimeSession(
            session_id="a",
            worker_id="w1",
            project_id="p1",
            started_at=t0,
            state=SessionState.COMPLETED,
            ended_at=t0 + timedelta(minutes=95),
            duration_minutes=95,
            note="Packing",
        ),
        TimeSession(session_id="b", worker_id="ghost", started_at=t0),
    ]

    rows = _lookup().timesheet(sessions, now=t0 + timedelta(minutes=30))

    assert rows[0].worker_name == "Ana Silva"
    assert rows[0].project_name == "Warehouse move"
    assert rows[0].duration == "1h 35m"
    assert rows[0].ended_at == "10:35"
    assert rows[1].worker_name == "Unknown Employee"
    assert rows[1].project_name == "Unassigned"
    assert rows[1].ended_at == "-"
    assert rows[1].minutes == 30


def test_schedule_rows():
    entry = ScheduleEntry(
        schedule_id="s1",
        worker_id="w1",
        shift_date=date(2026, 2, 3),
        start_time=time(8, 0),
        end_time=time(17, 0),
    )

    row = _lookup().schedule_rows([entry])[0]

    assert row["worker_name"] == "Ana Silva"
    assert row["shift"] == "08:00-17:00"
    assert row["planned"] == "8h 30m"
    assert row["state"] == "SCHEDULED"


def test_worker_board_skips_inactive_workers():
    t0 = datetime(2026, 2, 2, 9, 0)
    workers = InMemoryWorkerRoster(
        [
            Worker(worker_id="w2", first_name="Bruno", position="Picker"),
            Worker(worker_id="w1", first_name="Ana", last_name="Silva"),
            Worker(worker_id="w3", first_name="Carla", status=WorkerStatus.ON_LEAVE),
        ]
    )
    lookup = LookupService(workers, InMemoryProjectRoster())
    open_sessions = {"w2": TimeSession(session_id="b", worker_id="w2", project_id="gone", started_at=t0)}

    rows = lookup.worker_board(open_sessions.get, now=t0 + timedelta(minutes=40))

    assert [r["worker_id"] for r in rows] == ["w1", "w2"]
    assert rows[0]["session_id"] is None
    assert rows[0]["elapsed_minutes"] == 0
    assert rows[1]["position"] == "Picker"
    assert rows[1]["project_name"] == "Unknown Project"
    assert rows[1]["elapsed_minutes"] == 40

from __future__ import annotations

from datetime import timedelta

import pytest

from worktime.container import build_container
from worktime.main import create_app
from worktime.rosters.model import Project, Worker


@pytest.fixture
def container(clock):
    return build_container(
        clock=clock,
        workers=[Worker(worker_id="w1", first_name="Ana", last_name="Silva")],
        projects=[Project(project_id="p1", name="Warehouse move")],
    )


@pytest.fixture
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container)
    return app.test_client()


def test_clock_in_then_conflict(client):
    r = client.post("/api/sessions/clock-in", json={"worker_id": "w1", "project_id": "p1"})
    assert r.status_code == 201
    assert r.get_json()["session"]["state"] == "ACTIVE"

    r = client.post("/api/sessions/clock-in", json={"worker_id": "w1"})
    assert r.status_code == 409
    assert r.get_json()["success"] is False


def test_clock_in_requires_worker(client):
    r = client.post("/api/sessions/clock-in", json={})
    assert r.status_code == 400


def test_full_session_lifecycle_and_daily_report(client, clock, fixed_now):
    sid = client.post("/api/sessions/clock-in", json={"worker_id": "w1"}).get_json()["session"]["session_id"]

    assert client.post(f"/api/sessions/{sid}/pause").status_code == 200
    assert client.post(f"/api/sessions/{sid}/pause").status_code == 409
    assert client.post(f"/api/sessions/{sid}/resume").status_code == 200

    active = client.get("/api/workers/w1/active-session").get_json()["session"]
    assert active["session_id"] == sid

    clock.now = fixed_now + timedelta(minutes=95)
    r = client.post(f"/api/sessions/{sid}/clock-out")
    body = r.get_json()["session"]
    assert r.status_code == 200
    assert body["duration_minutes"] == 95
    assert body["state"] == "COMPLETED"

    assert client.post(f"/api/sessions/{sid}/clock-out").status_code == 409
    assert client.get("/api/workers/w1/active-session").get_json()["session"] is None

    daily = client.get(f"/api/reports/daily?date={fixed_now.date().isoformat()}").get_json()
    assert daily["total_minutes"] == 95
    assert daily["completed_session_count"] == 1
    assert daily["total_time"] == "1h 35m"


def test_clock_out_with_explicit_timestamp(client, fixed_now):
    sid = client.post("/api/sessions/clock-in", json={"worker_id": "w1"}).get_json()["session"]["session_id"]
    at = (fixed_now + timedelta(minutes=50)).isoformat()

    r = client.post(f"/api/sessions/{sid}/clock-out", json={"at": at})

    assert r.get_json()["session"]["duration_minutes"] == 50


def test_unknown_session_is_404(client):
    assert client.post("/api/sessions/nope/clock-out").status_code == 404
    assert client.get("/api/sessions/nope").status_code == 404


def test_list_sessions_and_timesheet(client):
    client.post("/api/sessions/clock-in", json={"worker_id": "w1", "project_id": "p1"})
    client.post("/api/sessions/clock-in", json={"worker_id": "w2"})

    sessions = client.get("/api/sessions?worker_id=w1").get_json()["sessions"]
    assert len(sessions) == 1

    assert client.get("/api/sessions?state=bogus").status_code == 400

    rows = client.get("/api/timesheet").get_json()["rows"]
    names = sorted(r["worker_name"] for r in rows)
    assert names == ["Ana Silva", "Unknown Employee"]


def test_weekly_report_excludes_open_sessions(client, clock, fixed_now):
    sid = client.post("/api/sessions/clock-in", json={"worker_id": "w1"}).get_json()["session"]["session_id"]
    clock.now = fixed_now + timedelta(minutes=600)
    client.post(f"/api/sessions/{sid}/clock-out")
    client.post("/api/sessions/clock-in", json={"worker_id": "w2"})
    clock.now = fixed_now + timedelta(minutes=900)

    weekly = client.get("/api/reports/weekly").get_json()

    assert weekly["total_minutes"] == 600
    assert weekly["average_minutes_per_day"] == pytest.approx(600 / 7)


def test_bad_date_query_is_400(client):
    assert client.get("/api/reports/daily?date=02-02-2026").status_code == 400


def test_schedule_endpoints(client):
    r = client.post(
        "/api/schedules",
        json={"worker_id": "w1", "shift_date": "2026-02-03", "start_time": "08:00", "end_time": "17:00"},
    )
    assert r.status_code == 201
    schedule = r.get_json()["schedule"]
    assert schedule["break_minutes"] == 30
    assert schedule["state"] == "SCHEDULED"

    sid = schedule["schedule_id"]
    assert client.post(f"/api/schedules/{sid}/missed").get_json()["schedule"]["state"] == "MISSED"
    assert client.post(f"/api/schedules/{sid}/complete").get_json()["schedule"]["state"] == "COMPLETED"
    assert client.post("/api/schedules/nope/complete").status_code == 404

    rows = client.get("/api/schedules?worker_id=w1").get_json()["schedules"]
    assert rows[0]["worker_name"] == "Ana Silva"

    bad = client.post("/api/schedules", json={"worker_id": "w1", "shift_date": "tomorrow"})
    assert bad.status_code == 400


def test_rollup_endpoints(client, clock, fixed_now):
    sid = client.post("/api/sessions/clock-in", json={"worker_id": "w1", "project_id": "p1"}).get_json()["session"][
        "session_id"
    ]
    clock.now = fixed_now + timedelta(minutes=60)
    client.post(f"/api/sessions/{sid}/clock-out")

    workers = client.get("/api/reports/workers").get_json()["rows"]
    projects = client.get("/api/reports/projects").get_json()

    assert workers[0]["worker_name"] == "Ana Silva"
    assert workers[0]["total_minutes"] == 60
    assert projects["rows"][0]["project_name"] == "Warehouse move"
    assert projects["completion_rate"] == 100


@pytest.mark.parametrize("at", ["2026-02-02T10:00:00+00:00", "2026-02-02T10:00:00+02:00", "soon"])
def test_clock_out_rejects_offset_or_malformed_timestamps(client, at):
    sid = client.post("/api/sessions/clock-in", json={"worker_id": "w1"}).get_json()["session"]["session_id"]

    r = client.post(f"/api/sessions/{sid}/clock-out", json={"at": at})

    assert r.status_code == 400
    assert r.get_json()["success"] is False
    assert client.get(f"/api/sessions/{sid}").get_json()["session"]["state"] == "ACTIVE"


def test_list_sessions_limit_must_be_numeric(client):
    client.post("/api/sessions/clock-in", json={"worker_id": "w1"})
    client.post("/api/sessions/clock-in", json={"worker_id": "w2"})

    assert len(client.get("/api/sessions?limit=1").get_json()["sessions"]) == 1

    r = client.get("/api/sessions?limit=ten")
    assert r.status_code == 400
    assert "limit" in r.get_json()["message"]
    assert client.get("/api/sessions?limit=-1").status_code == 400


def test_worker_board_lists_active_roster_workers(client, clock, fixed_now):
    client.post("/api/sessions/clock-in", json={"worker_id": "w1", "project_id": "p1"})
    client.post("/api/sessions/clock-in", json={"worker_id": "w2"})
    clock.now = fixed_now + timedelta(minutes=25)

    workers = client.get("/api/workers").get_json()["workers"]

    assert [w["worker_id"] for w in workers] == ["w1"]
    assert workers[0]["worker_name"] == "Ana Silva"
    assert workers[0]["state"] == "ACTIVE"
    assert workers[0]["project_name"] == "Warehouse move"
    assert workers[0]["elapsed_minutes"] == 25

from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_datetime
from ..common.http import json_body, json_endpoint, query_date
from ..container import Container
from ..core.enums import SessionState
from ..core.exceptions import ValidationError
from ..reports.aggregator import display_elapsed_minutes
from .model import SessionFilter, TimeSession


def session_to_dict(s: TimeSession, *, elapsed: int) -> dict:
    return {
        "session_id": s.session_id,
        "worker_id": s.worker_id,
        "project_id": s.project_id,
        "task_id": s.task_id,
        "started_at": s.started_at.isoformat(),
        "ended_at": s.ended_at.isoformat() if s.ended_at else None,
        "duration_minutes": s.duration_minutes,
        "elapsed_minutes": elapsed,
        "state": s.state.value,
        "note": s.note,
        "owner_date": s.owner_date.strftime("%Y-%m-%d"),
    }


def register(app: Flask, container: Container) -> None:
    registry = container.session_registry

    def _out(s: TimeSession) -> dict:
        return session_to_dict(s, elapsed=display_elapsed_minutes(s, container.clock()))

    @app.route("/api/sessions/clock-in", methods=["POST"], endpoint="api_clock_in")
    @json_endpoint
    def api_clock_in():
        data = json_body()
        s = registry.clock_in(
            data.get("worker_id") or "",
            project_id=data.get("project_id"),
            task_id=data.get("task_id"),
            note=data.get("note"),
        )
        return jsonify({"success": True, "session": _out(s)}), 201

    @app.route("/api/sessions/<session_id>/pause", methods=["POST"], endpoint="api_pause")
    @json_endpoint
    def api_pause(session_id: str):
        return jsonify({"success": True, "session": _out(registry.pause(session_id))})

    @app.route("/api/sessions/<session_id>/resume", methods=["POST"], endpoint="api_resume")
    @json_endpoint
    def api_resume(session_id: str):
        return jsonify({"success": True, "session": _out(registry.resume(session_id))})

    @app.route("/api/sessions/<session_id>/clock-out", methods=["POST"], endpoint="api_clock_out")
    @json_endpoint
    def api_clock_out(session_id: str):
        at_s = json_body().get("at")
        try:
            at = parse_iso_datetime(at_s) if at_s else None
        except ValueError:
            raise ValidationError("at must be a local ISO timestamp without offset")
        return jsonify({"success": True, "session": _out(registry.clock_out(session_id, at))})

    @app.route("/api/sessions/<session_id>", methods=["GET"], endpoint="api_session_detail")
    @json_endpoint
    def api_session_detail(session_id: str):
        return jsonify({"success": True, "session": _out(registry.get(session_id))})

    @app.route("/api/workers", methods=["GET"], endpoint="api_worker_board")
    @json_endpoint
    def api_worker_board():
        rows = container.lookup_service.worker_board(registry.active_session_for, now=container.clock())
        return jsonify({"success": True, "workers": rows})

    @app.route("/api/workers/<worker_id>/active-session", methods=["GET"], endpoint="api_active_session")
    @json_endpoint
    def api_active_session(worker_id: str):
        s = registry.active_session_for(worker_id)
        return jsonify({"success": True, "session": _out(s) if s else None})

    @app.route("/api/sessions", methods=["GET"], endpoint="api_sessions")
    @json_endpoint
    def api_sessions():
        state_s = (request.args.get("state") or "").strip().upper()
        try:
            state = SessionState(state_s) if state_s else None
        except ValueError:
            raise ValidationError(f"Unknown state {state_s}")
        limit_s = (request.args.get("limit") or "").strip()
        if limit_s and not limit_s.isdigit():
            raise ValidationError(f"limit must be a non-negative integer, got {limit_s}")
        session_filter = SessionFilter(
            worker_id=request.args.get("worker_id") or None,
            project_id=request.args.get("project_id") or None,
            state=state,
            start_date=query_date("start"),
            end_date=query_date("end"),
            limit=int(limit_s) if limit_s else None,
        )
        return jsonify({"success": True, "sessions": [_out(s) for s in registry.list_sessions(session_filter)]})

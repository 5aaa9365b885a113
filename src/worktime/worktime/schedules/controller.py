from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_hhmm, parse_iso_date
from ..common.http import json_body, json_endpoint, query_date
from ..container import Container
from ..core.enums import ScheduleState
from ..core.exceptions import ValidationError
from .model import ScheduleEntry, ScheduleFilter


def schedule_to_dict(e: ScheduleEntry) -> dict:
    return {
        "schedule_id": e.schedule_id,
        "worker_id": e.worker_id,
        "shift_date": e.shift_date.strftime("%Y-%m-%d"),
        "start_time": e.start_time.strftime("%H:%M"),
        "end_time": e.end_time.strftime("%H:%M"),
        "break_minutes": e.break_minutes,
        "planned_minutes": e.planned_minutes,
        "state": e.state.value,
        "note": e.note,
    }


def register(app: Flask, container: Container) -> None:
    schedules = container.schedule_service

    @app.route("/api/schedules", methods=["POST"], endpoint="api_schedule_create")
    @json_endpoint
    def api_schedule_create():
        data = json_body()
        try:
            shift_date = parse_iso_date(data.get("shift_date") or "")
            start_time = parse_hhmm(data.get("start_time") or "")
            end_time = parse_hhmm(data.get("end_time") or "")
        except ValueError:
            raise ValidationError("shift_date must be YYYY-MM-DD and times HH:MM")

        entry = schedules.create_schedule(
            data.get("worker_id") or "",
            shift_date,
            start_time,
            end_time,
            break_minutes=data.get("break_minutes"),
            note=data.get("note"),
        )
        return jsonify({"success": True, "schedule": schedule_to_dict(entry)}), 201

    @app.route("/api/schedules/<schedule_id>/complete", methods=["POST"], endpoint="api_schedule_complete")
    @json_endpoint
    def api_schedule_complete(schedule_id: str):
        return jsonify({"success": True, "schedule": schedule_to_dict(schedules.mark_completed(schedule_id))})

    @app.route("/api/schedules/<schedule_id>/missed", methods=["POST"], endpoint="api_schedule_missed")
    @json_endpoint
    def api_schedule_missed(schedule_id: str):
        return jsonify({"success": True, "schedule": schedule_to_dict(schedules.mark_missed(schedule_id))})

    @app.route("/api/schedules", methods=["GET"], endpoint="api_schedules")
    @json_endpoint
    def api_schedules():
        state_s = (request.args.get("state") or "").strip().upper()
        try:
            state = ScheduleState(state_s) if state_s else None
        except ValueError:
            raise ValidationError(f"Unknown state {state_s}")

        entries = schedules.list_schedules(
            ScheduleFilter(
                worker_id=request.args.get("worker_id") or None,
                state=state,
                start_date=query_date("start"),
                end_date=query_date("end"),
            )
        )
        return jsonify({"success": True, "schedules": container.lookup_service.schedule_rows(entries)})

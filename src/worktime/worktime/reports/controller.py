from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_duration
from ..common.http import json_endpoint, query_date
from ..container import Container
from ..sessions.model import SessionFilter


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    @app.route("/api/reports/daily", methods=["GET"], endpoint="api_report_daily")
    @json_endpoint
    def api_report_daily():
        summary = reports.daily_summary(query_date("date"))
        return jsonify(
            {
                "success": True,
                "date": summary.date.strftime("%Y-%m-%d"),
                "total_minutes": summary.total_minutes,
                "total_time": format_duration(summary.total_minutes),
                "distinct_active_workers": summary.distinct_active_workers,
                "completed_session_count": summary.completed_session_count,
            }
        )

    @app.route("/api/reports/weekly", methods=["GET"], endpoint="api_report_weekly")
    @json_endpoint
    def api_report_weekly():
        summary = reports.weekly_summary(query_date("reference_date"))
        return jsonify(
            {
                "success": True,
                "window_start": summary.window_start.strftime("%Y-%m-%d"),
                "window_end": summary.window_end.strftime("%Y-%m-%d"),
                "total_minutes": summary.total_minutes,
                "total_time": format_duration(summary.total_minutes),
                "completed_session_count": summary.completed_session_count,
                "average_minutes_per_day": summary.average_minutes_per_day,
            }
        )

    @app.route("/api/reports/workers", methods=["GET"], endpoint="api_report_workers")
    @json_endpoint
    def api_report_workers():
        report = reports.worker_rollup(start=query_date("start"), end=query_date("end"))
        return jsonify({"success": True, "rows": report.rows})

    @app.route("/api/reports/projects", methods=["GET"], endpoint="api_report_projects")
    @json_endpoint
    def api_report_projects():
        start, end = query_date("start"), query_date("end")
        report = reports.project_rollup(start=start, end=end)
        return jsonify(
            {
                "success": True,
                "rows": report.rows,
                "completion_rate": reports.completion_rate(start=start, end=end),
            }
        )

    @app.route("/api/timesheet", methods=["GET"], endpoint="api_timesheet")
    @json_endpoint
    def api_timesheet():
        sessions = container.session_registry.list_sessions(
            SessionFilter(
                worker_id=request.args.get("worker_id") or None,
                project_id=request.args.get("project_id") or None,
                start_date=query_date("start"),
                end_date=query_date("end"),
            )
        )
        rows = container.lookup_service.timesheet(sessions, now=container.clock())
        return jsonify({"success": True, "rows": [asdict(r) for r in rows]})

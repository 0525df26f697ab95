from __future__ import annotations

import csv
import io
from datetime import date

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import error_response
from ..core.exceptions import DomainError
from ..container import Container
from .model import AttendanceEvent


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service
    calendar = container.calendar

    def _requested_day() -> date:
        value = request.args.get("date")
        return parse_iso_date(value) if value else service.today()

    def _event_to_dict(e: AttendanceEvent) -> dict:
        return {
            "id": e.event_id,
            "student_id": e.student_id,
            "student_name": e.student_name,
            "timestamp": e.timestamp.isoformat(),
            "time": calendar.format_time(e.timestamp),
        }

    @app.route("/api/attendance", methods=["GET"], endpoint="day_report")
    def day_report():
        try:
            report = service.day_report(_requested_day())
        except DomainError as e:
            return error_response(e)
        return jsonify(
            {
                "success": True,
                "date": report.day.isoformat(),
                "events": [_event_to_dict(e) for e in report.events],
                "total_students": report.total_students,
                "present_count": report.present_count,
                "present_percent": report.present_percent,
            }
        )

    @app.route("/api/attendance/export", methods=["GET"], endpoint="export_attendance")
    def export_attendance():
        try:
            day = _requested_day()
        except DomainError as e:
            return error_response(e)

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=["student_code", "student_name", "time"])
        out.write("Student ID,Student Name,Time\r\n")
        for row in service.export_rows(day):
            writer.writerow(row)

        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=attendance_{day.isoformat()}.csv"},
        )

    @app.route("/api/attendance/recent-dates", methods=["GET"], endpoint="recent_dates")
    def recent_dates():
        return jsonify(
            {
                "success": True,
                "dates": [{"date": d.isoformat(), "count": n} for d, n in service.recent_dates()],
            }
        )

    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    def dashboard():
        return jsonify({"success": True, **service.dashboard()})

from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response, json_body
from ..core.enums import ScanMode
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from ..students.controller import student_to_dict


def register(app: Flask, container: Container) -> None:
    scans = container.scan_service
    session = container.scan_session

    @app.route("/api/scan", methods=["POST"], endpoint="scan")
    def scan():
        try:
            data = json_body()
            result = scans.submit_signature(data.get("signature"))
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, **result.to_dict()})

    @app.route("/api/scan/session/start", methods=["POST"], endpoint="scan_session_start")
    def scan_session_start():
        try:
            data = json_body()
            try:
                mode = ScanMode(data.get("mode", ""))
            except ValueError:
                raise ValidationError("mode must be 'enroll' or 'recognize'")
            session.start(mode)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "mode": mode.value})

    @app.route("/api/scan/session/signature", methods=["POST"], endpoint="scan_session_signature")
    def scan_session_signature():
        try:
            data = json_body()
            result = session.on_signature(data.get("signature"))
        except DomainError as e:
            return error_response(e)
        return jsonify(
            {
                "success": True,
                "active": session.active,
                "captured": session.captured is not None,
                "result": result.to_dict() if result else None,
            }
        )

    @app.route("/api/scan/session/stop", methods=["POST"], endpoint="scan_session_stop")
    def scan_session_stop():
        session.stop()
        return jsonify({"success": True})

    @app.route("/api/scan/session/enroll", methods=["POST"], endpoint="scan_session_enroll")
    def scan_session_enroll():
        try:
            data = json_body()
            student = session.enroll(full_name=data.get("name", ""), student_code=data.get("student_id", ""))
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "student": student_to_dict(student)}), 201

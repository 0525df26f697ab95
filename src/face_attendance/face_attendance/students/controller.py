from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import error_response, json_body
from ..core.exceptions import DomainError
from ..container import Container
from .model import Student


def student_to_dict(s: Student, *, include_signature: bool = False) -> dict:
    out = {
        "id": s.student_id,
        "name": s.full_name,
        "student_id": s.student_code,
        "enrollment_date": s.enrolled_at.isoformat(),
    }
    if include_signature:
        out["signature"] = list(s.signature)
    return out


def register(app: Flask, container: Container) -> None:
    service = container.student_service

    @app.route("/api/students", methods=["GET"], endpoint="list_students")
    def list_students():
        students = service.search(request.args.get("q", ""))
        return jsonify({"success": True, "students": [student_to_dict(s) for s in students]})

    @app.route("/api/students", methods=["POST"], endpoint="enroll_student")
    def enroll_student():
        try:
            data = json_body()
            student = service.enroll(
                full_name=data.get("name", ""),
                student_code=data.get("student_id", ""),
                signature=data.get("signature"),
            )
            return jsonify({"success": True, "student": student_to_dict(student)}), 201
        except DomainError as e:
            return error_response(e)

    @app.route("/api/students/<student_id>", methods=["GET"], endpoint="get_student")
    def get_student(student_id: str):
        try:
            student = service.get_student(student_id)
            return jsonify({"success": True, "student": student_to_dict(student, include_signature=True)})
        except DomainError as e:
            return error_response(e)

    @app.route("/api/students/<student_id>", methods=["PUT"], endpoint="update_student")
    def update_student(student_id: str):
        try:
            data = json_body()
            student = service.update_student(
                student_id,
                full_name=data.get("name", ""),
                student_code=data.get("student_id", ""),
            )
            return jsonify({"success": True, "student": student_to_dict(student)})
        except DomainError as e:
            return error_response(e)

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="delete_student")
    def delete_student(student_id: str):
        try:
            service.delete_student(student_id)
            return jsonify({"success": True})
        except DomainError as e:
            return error_response(e)

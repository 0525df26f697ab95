from __future__ import annotations

from flask import jsonify, request

from ..core.exceptions import DomainError, DuplicateKeyError, NotFoundError, PersistenceError, ValidationError


_STATUS = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (DuplicateKeyError, 409),
    (PersistenceError, 503),
)


def error_response(e: DomainError):
    for exc_type, status in _STATUS:
        if isinstance(e, exc_type):
            return jsonify({"success": False, "message": str(e)}), status
    return jsonify({"success": False, "message": str(e)}), 400


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data

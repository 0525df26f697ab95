from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.logging_utils import configure_logging
from .container import Container, build_backend, build_container
from .scanning.controller import register as register_scanning
from .students.controller import register as register_students

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        storage_backend = getattr(settings, "STORAGE_BACKEND", "json")
        logger.info("settings=%s storage=%s", settings_module, storage_backend)
        backend = build_backend(
            storage_backend=storage_backend,
            data_file=getattr(settings, "DATA_FILE", None),
            db_config=getattr(settings, "DB_CONFIG", None),
            auto_init_db=bool(getattr(settings, "AUTO_INIT_DB", False)),
            schema_path=SCHEMA_PATH,
        )
        container = build_container(
            backend=backend,
            match_threshold=float(getattr(settings, "MATCH_THRESHOLD", 0.6)),
            timezone=getattr(settings, "ATTENDANCE_TIMEZONE", "local"),
        )

    app.extensions["face_attendance"] = container

    @app.route("/health", endpoint="health")
    def health():
        return jsonify(
            {
                "status": "running",
                "threshold": container.student_service.match_threshold,
                "timezone": container.calendar.zone_name,
                "students": container.student_service.count(),
            }
        )

    register_students(app, container)
    register_attendance(app, container)
    register_scanning(app, container)

    return app

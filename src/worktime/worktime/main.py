from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .container import Container, build_container
from .core.enums import StorageBackend
from .database.bootstrap import apply_schema, list_tables
from .reports.controller import register as register_reports
from .schedules.controller import register as register_schedules
from .sessions.controller import register as register_sessions

logger = logging.getLogger("worktime")


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        backend = str(getattr(settings, "STORAGE_BACKEND", StorageBackend.MEMORY.value))
        db_config = dict(getattr(settings, "DB_CONFIG", {}))
        logger.info("settings=%s backend=%s", settings_module, backend)

        if backend == StorageBackend.MYSQL.value and bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            storage_backend=backend,
            db_config=db_config,
            default_break_minutes=int(getattr(settings, "DEFAULT_BREAK_MINUTES", 30)),
        )

    app.extensions["worktime"] = container

    register_sessions(app, container)
    register_schedules(app, container)
    register_reports(app, container)

    @app.route("/", endpoint="index")
    def index():
        return jsonify({"message": "worktime API", "backend": container.backend.value})

    return app

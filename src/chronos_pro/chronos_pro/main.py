from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_kiosk
from .common.logging import setup_logging
from .common.web import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .employees.controller import register as register_employees
from .locations.controller import register as register_locations
from .notifications.controller import register as register_notifications
from .reports.controller import register as register_reports
from .schedules.controller import register as register_schedules
from .timesheet.controller import register as register_timesheet
from .vacations.controller import register as register_vacations

logger = logging.getLogger(__name__)

ROOT = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder="../../../templates", static_folder="../../../static")

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FILE", "") or None)
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=ROOT / "database" / "seed.sql")
            ensure_demo_users(db_config)
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            face_match_threshold=float(getattr(settings, "FACE_MATCH_THRESHOLD", 0.45)),
            face_search_threshold=float(getattr(settings, "FACE_SEARCH_THRESHOLD", 0.6)),
        )

    register_error_handlers(app)
    register_employees(app, container)
    register_kiosk(app, container)
    register_vacations(app, container)
    register_locations(app, container)
    register_schedules(app, container)
    register_timesheet(app, container)
    register_notifications(app, container)
    register_reports(app, container)

    return app

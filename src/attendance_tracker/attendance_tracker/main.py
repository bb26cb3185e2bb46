from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .container import Container, build_container
from .core.constants import (
    DEFAULT_NOTIFICATION_INTERVAL_SECONDS,
    DEFAULT_REMINDER_MINUTES,
    DEFAULT_SESSION_DAYS,
)
from .database.bootstrap import apply_schema, ensure_demo_user, list_tables
from .notifications.controller import register as register_notifications
from .subjects.controller import register as register_subjects
from .timetable.controller import register as register_timetable
from .users.controller import register as register_users
from .views.controller import register as register_views

logger = logging.getLogger(__name__)


def create_app(settings_override: Optional[Mapping[str, Any]] = None, *, container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    ``settings_override`` wins over the APP_ENV settings module; passing a
    ready ``container`` skips the database wiring entirely.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    overrides = dict(settings_override or {})

    def setting(name: str, default: Any = None) -> Any:
        if name in overrides:
            return overrides[name]
        return getattr(settings, name, default)

    logging.basicConfig(
        level=str(setting("LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app.secret_key = setting("SECRET_KEY")
    app.config["DEBUG"] = bool(setting("DEBUG", False))
    app.config["TESTING"] = bool(setting("TESTING", False))
    session_days = int(setting("SESSION_DAYS", DEFAULT_SESSION_DAYS))
    app.permanent_session_lifetime = timedelta(days=session_days)

    if container is None:
        db_config = setting("DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(setting("AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
            if bool(setting("AUTO_DEMO_USER", False)):
                ensure_demo_user(db_config)
                logger.info("demo user ready")

        container = build_container(
            db_config=db_config,
            session_days=session_days,
            reminder_minutes=int(setting("REMINDER_MINUTES", DEFAULT_REMINDER_MINUTES)),
            notification_interval_seconds=float(
                setting("NOTIFICATION_INTERVAL_SECONDS", DEFAULT_NOTIFICATION_INTERVAL_SECONDS)
            ),
        )

    app.extensions["attendance_tracker"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_views(app, container)
    register_subjects(app, container)
    register_attendance(app, container)
    register_timetable(app, container)
    register_notifications(app, container)

    return app

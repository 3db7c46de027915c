from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, send_from_directory

from .attendance.controller import register as register_attendance
from .common.web import login_required, register_error_handlers
from .config import FieldForceSettings, get_settings_module, load_settings
from .container import Container, build_container
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_schema, list_tables
from .expenses.controller import register as register_expenses
from .reports.controller import register as register_reports
from .tracking.controller import register as register_tracking
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    """Application factory. Pass a prebuilt `container` to skip database wiring."""

    load_dotenv(override=False)
    settings_module = settings_module or get_settings_module()
    settings = load_settings(settings_module)

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        container = build_container(db_config=db_config, settings=FieldForceSettings.from_module(settings))

    register_error_handlers(app)
    register_users(app, container)
    register_attendance(app, container)
    register_tracking(app, container)
    register_dashboard(app, container)
    register_expenses(app, container)
    register_reports(app, container)

    blob_url = container.settings.blob_base_url
    if blob_url.startswith("/"):
        blob_root = Path(container.settings.blob_root).resolve()

        @app.route(f"{blob_url.rstrip('/')}/<path:path>", endpoint="blob")
        @login_required
        def blob(path: str):
            return send_from_directory(blob_root, path)

    return app

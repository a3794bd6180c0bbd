from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .common.log import setup_logging
from .common.web import register_error_handlers
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .location.controller import register as register_location
from .reports.controller import register as register_reports
from .settings.controller import register as register_settings
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

INTEGRATION_KEYS = (
    "REVERSE_GEOCODE_PROVIDER",
    "REVERSE_GEOCODE_USER_AGENT",
    "REVERSE_GEOCODE_LANGUAGE",
    "MAPBOX_TOKEN",
    "GOOGLE_MAPS_KEY",
    "PROVIDER_TIMEOUT_SECONDS",
    "CLOUDINARY_CLOUD_NAME",
    "CLOUDINARY_API_KEY",
    "CLOUDINARY_API_SECRET",
    "ADMIN_INVITE_CODE",
)


def create_app(*, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FILE", None))
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
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_users(db_config)
            logger.info("Demo users ready")

        integrations = {key: getattr(settings, key, None) for key in INTEGRATION_KEYS}
        container = build_container(db_config=db_config, integrations=integrations)

    register_error_handlers(app)
    register_users(app, container)
    register_attendance(app, container)
    register_settings(app, container)
    register_reports(app, container)
    register_location(app, container)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"ok": True})

    return app

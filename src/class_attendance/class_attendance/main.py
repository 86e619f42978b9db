from __future__ import annotations

import importlib
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .reports.controller import register as register_reports
from .timetable.controller import register as register_timetable

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def setup_logging(app: Flask, *, level: str = "INFO", log_dir: Optional[str] = None) -> None:
    logging.getLogger("mysql.connector").setLevel(logging.WARNING)

    # app.logger is a child of the package logger and propagates to it.
    package_logger = logging.getLogger(__package__)
    package_logger.setLevel(level)
    if package_logger.handlers:
        return

    log_format = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(threadName)s : %(message)s")

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(log_format)
    console_handler.setLevel(logging.DEBUG if app.debug else logging.INFO)
    package_logger.addHandler(console_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, "app.log"),
            maxBytes=1024 * 1024 * 10,
            backupCount=5,
        )
        file_handler.setFormatter(log_format)
        file_handler.setLevel(logging.INFO)
        package_logger.addHandler(file_handler)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        for error_type, status in _STATUS_BY_ERROR:
            if isinstance(e, error_type):
                return jsonify({"error": str(e)}), status

        if isinstance(e, InternalError):
            logger.error("Internal error: %s", e, exc_info=True)
        else:
            logger.error("Unhandled domain error: %s", e, exc_info=True)
        return jsonify({"error": "Internal server error"}), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_exception(e: Exception):
        logger.error("Unhandled exception: %s", e, exc_info=True)
        return jsonify({"error": "Internal server error"}), 500


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    setup_logging(
        app,
        level=str(getattr(settings, "LOG_LEVEL", "INFO")),
        log_dir=getattr(settings, "LOG_DIR", None),
    )
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
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            logger.info("Demo seed ready")
        container = build_container(db_config=db_config)

    register_error_handlers(app)
    register_attendance(app, container)
    register_timetable(app, container)
    register_reports(app, container)

    return app

from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask, jsonify

from .config import get_settings_module
from .container import Container, build_container
from .core.exceptions import (
    AuthorizationError,
    CollaboratorUnavailable,
    NotFoundError,
    RuleViolation,
    ValidationError,
)
from .database.bootstrap import apply_schema, list_tables
from .database.seed import seed_demo_data
from .attendance.controller import register as register_attendance
from .excuses.controller import register as register_excuses
from .reports.controller import register as register_reports
from .sessions.controller import register as register_sessions

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    # basicConfig is a no-op when the host (gunicorn, pytest) already installed handlers.
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("geo_attendance").setLevel(level if isinstance(level, int) else str(level).upper())


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(RuleViolation)
    def rule_violation(e: RuleViolation):
        return jsonify({"error": str(e), "reasons": [r.to_dict() for r in e.reasons]}), 409

    @app.errorhandler(ValidationError)
    def validation_error(e: ValidationError):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(NotFoundError)
    def not_found(e: NotFoundError):
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(AuthorizationError)
    def forbidden(e: AuthorizationError):
        return jsonify({"error": str(e)}), 403

    @app.errorhandler(CollaboratorUnavailable)
    def unavailable(e: CollaboratorUnavailable):
        logger.warning("Collaborator unavailable: %s", e)
        return jsonify({"error": str(e)}), 503


def create_app(*, settings=None, container: Container | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = None
    if settings is None:
        settings_module = get_settings_module()
        settings = importlib.import_module(settings_module)

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    backend = str(getattr(settings, "STORE_BACKEND", "memory")).lower()
    db_config = dict(getattr(settings, "DB_CONFIG", {}))
    logger.info("Starting with settings=%s backend=%s", settings_module or type(settings).__name__, backend)

    if backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config)
        logger.info(
            "Schema ready on %s@%s:%s/%s (tables=%d)",
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
            len(list_tables(db_config)),
        )

    container = container or build_container(settings=settings)

    if bool(getattr(settings, "SEED_DEMO_DATA", False)):
        seed_demo_data(container.sessions_repo, container.attendance_repo, container.excuses_repo)

    register_error_handlers(app)
    register_sessions(app, container)
    register_attendance(app, container)
    register_excuses(app, container)
    register_reports(app, container)

    app.extensions["geo_attendance"] = container
    return app

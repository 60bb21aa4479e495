from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.exceptions import ConflictError, NotFoundError, ValidationError
from .core.policy import PayrollPolicy
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .payroll.controller import register as register_payroll
from .requests.controller import register as register_requests

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def _register_error_handlers(app: Flask) -> None:
    def _error(message: str, status: int):
        return jsonify({"success": False, "message": message}), status

    @app.errorhandler(ValidationError)
    def _validation(e):
        return _error(str(e), 400)

    @app.errorhandler(NotFoundError)
    def _not_found(e):
        return _error(str(e), 404)

    @app.errorhandler(ConflictError)
    def _conflict(e):
        return _error(str(e), 409)

    @app.errorhandler(HTTPException)
    def _http(e):
        # Routing redirects are HTTPExceptions too; let them through.
        if e.code is not None and e.code < 400:
            return e
        return _error(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(e):
        logger.exception("Unhandled error")
        return _error("Internal server error", 500)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

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
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")

        container = build_container(db_config=db_config, policy=PayrollPolicy.from_settings(settings))

    _register_error_handlers(app)
    register_attendance(app, container)
    register_payroll(app, container)
    register_requests(app, container)

    return app

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .common.logging_config import configure_logging
from .core.exceptions import DomainError
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables

from .container import Container, build_container
from .aggregation.controller import register as register_aggregation
from .audit.controller import register as register_audit
from .billing.controller import register as register_billing
from .dashboard.controller import register as register_dashboard
from .invoices.controller import register as register_invoices
from .timesheets.controller import register as register_timesheets
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"success": False, "error": "http_error", "message": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error")
        return jsonify({"success": False, "error": "server_error", "message": "Internal server error"}), 500


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app. Tests pass a ``container`` wired over in-memory repositories."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.sort_keys = False

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            # seed.sql refers to the demo candidate, so users go first
            ensure_demo_users(db_config)
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            logger.info("Demo seed ready")

        container = build_container(
            db_config=db_config,
            smtp_config=getattr(settings, "SMTP_CONFIG", None),
            admin_emails=getattr(settings, "ADMIN_EMAILS", ()),
            invoice_due_days=int(getattr(settings, "INVOICE_DUE_DAYS", 30)),
        )

    register_error_handlers(app)

    register_users(app, container)
    register_billing(app, container)
    register_timesheets(app, container)
    register_aggregation(app, container)
    register_invoices(app, container)
    register_audit(app, container)
    register_dashboard(app, container)

    return app

from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .container import Container, build_container
from .core.logging import configure_logging, get_logger
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig, DatabaseConnection
from .leaves.controller import register as register_leaves
from .payroll.controller import register as register_payroll
from .settings import get_settings_module

SCHEMA_PATH = Path(__file__).resolve().parent / "database" / "schema.sql"

log = get_logger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app; pass ``container`` to run over non-MySQL repositories."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    db_config = getattr(settings, "DB_CONFIG")

    configure_logging(
        getattr(settings, "LOG_LEVEL", "INFO"),
        json_output=bool(getattr(settings, "LOG_JSON", True)),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
            statements = apply_schema(conn, schema_path=SCHEMA_PATH)
            log.info("schema_applied", statements=statements, tables=len(list_tables(conn)))
        container = build_container(
            db_config=db_config,
            policy_overrides=getattr(settings, "PAYROLL_POLICY", None),
        )

    log.info(
        "app_starting",
        settings=settings_module,
        db=f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}",
    )

    register_error_handlers(app)
    register_payroll(app, container)
    register_attendance(app, container)
    register_leaves(app, container)

    return app

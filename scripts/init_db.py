from __future__ import annotations

import importlib

from dotenv import load_dotenv

from hr_payroll.core.logging import configure_logging, get_logger
from hr_payroll.database.bootstrap import apply_schema, list_tables
from hr_payroll.database.connection import DBConfig, DatabaseConnection
from hr_payroll.main import SCHEMA_PATH
from hr_payroll.settings import get_settings_module

log = get_logger("scripts.init_db")


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    config = DBConfig.from_mapping(dict(settings.DB_CONFIG))
    conn = DatabaseConnection.get_instance(config)
    statements = apply_schema(conn, schema_path=SCHEMA_PATH)
    log.info(
        "schema_applied",
        target=f"{config.user}@{config.host}:{config.port}/{config.database}",
        statements=statements,
        tables=len(list_tables(conn)),
    )


if __name__ == "__main__":
    main()

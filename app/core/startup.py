"""Process start checks for the portal API and the maintenance scripts."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_config
from app.core.exceptions import ConfigurationError
from app.core.logging_config import configure_logging
from app.database import db as db_module
from app.database.db import get_active_database_url, verify_database_connection

logger = logging.getLogger(__name__)

PIPELINE_TABLES = frozenset({"tax_returns", "products", "product_stages", "client_products", "stage_transitions"})


@dataclass(frozen=True)
class StartupReport:
    database_ok: bool
    schema_ready: bool
    database_scheme: str


def missing_pipeline_tables() -> set[str]:
    """Pipeline tables absent from the active database."""
    try:
        present = set(inspect(db_module.get_engine()).get_table_names())
    except SQLAlchemyError as exc:
        logger.warning(
            "startup.database.inspect_failed",
            extra={"event": "startup.database.inspect_failed", "error": str(exc)},
        )
        return set(PIPELINE_TABLES)
    return set(PIPELINE_TABLES - present)


def check_runtime(check_schema: bool = True) -> StartupReport:
    config = get_config()
    scheme = get_active_database_url().split("://", 1)[0]

    database_ok = verify_database_connection()
    if not database_ok:
        if config.DB_CONNECTIVITY_REQUIRED:
            raise ConfigurationError("Database connectivity check failed.")
        logger.warning(
            "startup.database.unreachable",
            extra={"event": "startup.database.unreachable", "database_url_scheme": scheme},
        )

    schema_ready = False
    if database_ok and check_schema:
        missing = missing_pipeline_tables()
        schema_ready = not missing
        if missing:
            logger.warning(
                "startup.database.schema_missing",
                extra={
                    "event": "startup.database.schema_missing",
                    "missing_tables": sorted(missing),
                    "hint": "run scripts/create_db.py",
                },
            )

    if config.is_production and scheme.startswith("sqlite"):
        logger.warning("startup.production.sqlite_detected", extra={"event": "startup.production.sqlite_detected"})

    report = StartupReport(database_ok=database_ok, schema_ready=schema_ready, database_scheme=scheme)
    logger.info(
        "startup.checked",
        extra={
            "event": "startup.checked",
            "env": config.ENV,
            "database_url_scheme": scheme,
            "database_ok": database_ok,
            "schema_ready": schema_ready,
        },
    )
    return report


def bootstrap(check_schema: bool = True) -> StartupReport:
    configure_logging()
    return check_runtime(check_schema=check_schema)

"""Bring the portal database to the current pipeline schema."""

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from alembic import command
from alembic.config import Config as AlembicConfig
from alembic.util import CommandError
from sqlalchemy.exc import SQLAlchemyError

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT))

import app.database.db as db_module
from app.core.exceptions import ConfigurationError
from app.core.startup import bootstrap, missing_pipeline_tables

logger = logging.getLogger(__name__)

SQLITE_PREFIX = "sqlite:///"


def alembic_config(database_url: str) -> AlembicConfig:
    cfg = AlembicConfig(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", database_url)
    return cfg


def sqlite_file(database_url: str) -> Path | None:
    """Filesystem path of a file-backed SQLite URL, relative paths resolved from the project root."""
    if not database_url.startswith(SQLITE_PREFIX):
        return None
    raw = database_url[len(SQLITE_PREFIX) :]
    if raw in {"", ":memory:"}:
        return None
    path = Path(raw)
    return path if path.is_absolute() else (PROJECT_ROOT / path).resolve()


def backup_sqlite_file(database_url: str) -> Path | None:
    """Move an existing local database aside and point the engine at a fresh file."""
    path = sqlite_file(database_url)
    backup = None
    if path is not None and path.exists():
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        backup = path.with_name(f"{path.stem}.backup_{stamp}{path.suffix}")
        db_module.get_engine().dispose()
        path.replace(backup)
    db_module.reset_engine(database_url)
    return backup


def init_db() -> Path | None:
    """Upgrade to head and return the backup path when a local SQLite file had to be rebuilt."""
    bootstrap(check_schema=False)
    url = db_module.get_active_database_url()
    backup = None
    try:
        command.upgrade(alembic_config(url), "head")
    except (CommandError, SQLAlchemyError) as exc:
        if sqlite_file(url) is None:
            raise
        backup = backup_sqlite_file(url)
        logger.warning(
            "database.sqlite.rebuilt",
            extra={
                "event": "database.sqlite.rebuilt",
                "backup_path": str(backup) if backup else None,
                "reason": str(exc),
            },
        )
        command.upgrade(alembic_config(url), "head")

    missing = missing_pipeline_tables()
    if missing:
        raise ConfigurationError(f"Schema upgrade left pipeline tables missing: {', '.join(sorted(missing))}")
    logger.info(
        "database.schema.ready",
        extra={"event": "database.schema.ready", "database_url_scheme": url.split("://", 1)[0]},
    )
    return backup


if __name__ == "__main__":
    init_db()

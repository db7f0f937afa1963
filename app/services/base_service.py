"""Shared service base with robust session lifecycle behavior."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import PersistenceError
from app.database import db as db_module

logger = logging.getLogger(__name__)


class BaseService:
    """Base class for tenant-scoped services operating on a SQLAlchemy session."""

    def __init__(self, tenant_id: int, db: Session | None = None) -> None:
        self.tenant_id = tenant_id
        self._owns_session = db is None
        self.db = db or db_module.SessionLocal()

    def _persistence_failure(self, event: str, exc: SQLAlchemyError) -> PersistenceError:
        self.db.rollback()
        logger.error(event, extra={"event": event, "tenant_id": self.tenant_id, "error": str(exc)})
        return PersistenceError("Could not save changes.")

    @contextmanager
    def guarded_write(self) -> Iterator[None]:
        """Statements run inside roll back and raise PersistenceError when the database fails."""
        try:
            yield
        except SQLAlchemyError as exc:
            raise self._persistence_failure("database.write_failed", exc) from exc

    def flush(self) -> None:
        with self.guarded_write():
            self.db.flush()

    def commit(self) -> None:
        """Commit current transaction; roll back and raise PersistenceError on failure."""
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._persistence_failure("database.commit_failed", exc) from exc

    def rollback(self) -> None:
        self.db.rollback()

    def close(self) -> None:
        if self._owns_session:
            self.db.close()

    def __enter__(self) -> "BaseService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.rollback()
        self.close()

"""Dependency providers for API handlers."""

from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from app.auth.jwt import read_portal_claims
from app.core.config import Config, get_config
from app.database.db import get_db


@dataclass(frozen=True)
class CurrentUser:
    user_id: int
    role: str
    tenant_id: int
    claims: dict[str, Any]

    @property
    def is_client(self) -> bool:
        return self.role == "client"


def get_settings() -> Config:
    """Return validated application configuration."""
    return get_config()


def get_db_session() -> Generator[Session, None, None]:
    """Yield SQLAlchemy session for dependency injection."""
    yield from get_db()


def get_current_user(token: str, settings: Config | None = None) -> CurrentUser:
    """Resolve the current user from a bearer token."""
    cfg = settings or get_settings()
    claims = read_portal_claims(token, secret=cfg.JWT_SECRET)
    return CurrentUser(
        user_id=claims.user_id,
        role=claims.role,
        tenant_id=claims.tenant_id,
        claims=claims.raw,
    )

from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.auth.jwt import create_access_token
from app.core.config import get_config
from app.models import Base, ReturnPrepStatus, ReturnType, TaxReturn, Tenant, User


@pytest.fixture
def session_factory(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'clienthub_test.db'}")
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )
    Base.metadata.create_all(bind=engine)
    yield TestingSessionLocal
    engine.dispose()


@pytest.fixture
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def tenant(session):
    row = Tenant(name="acme")
    session.add(row)
    session.commit()
    return row


@pytest.fixture
def admin(session, tenant):
    user = User(tenant_id=tenant.id, email="admin@acme.test", first_name="Ada", is_admin=True)
    session.add(user)
    session.commit()
    return user


@pytest.fixture
def make_client(session, tenant):
    """Create a client with one return; returns ``(user, tax_return)``."""
    counter = {"n": 0}

    def _make(
        first_name: str = "Client",
        status: ReturnPrepStatus | None = ReturnPrepStatus.NOT_STARTED,
        return_type: ReturnType = ReturnType.PERSONAL,
        archived: bool = False,
        tenant_id: int | None = None,
    ):
        counter["n"] += 1
        user = User(
            tenant_id=tenant_id or tenant.id,
            email=f"{first_name.lower()}{counter['n']}@example.com",
            first_name=first_name,
            last_name="Doe",
            is_archived=archived,
        )
        session.add(user)
        session.flush()
        tax_return = TaxReturn(
            tenant_id=user.tenant_id,
            user_id=user.id,
            return_type=return_type,
            name="Personal Return" if return_type is ReturnType.PERSONAL else "Business Return",
            tax_year=2025,
            status=status,
        )
        session.add(tax_return)
        session.commit()
        return user, tax_return

    return _make


@pytest.fixture
def auth_header():
    def _header(role: str = "admin", tenant_id: int = 1, user_id: int = 1) -> dict[str, str]:
        cfg = get_config()
        token = create_access_token(user_id=user_id, tenant_id=tenant_id, role=role, secret=cfg.JWT_SECRET)
        return {"Authorization": f"Bearer {token}"}

    return _header


@pytest.fixture
def api_client(session_factory):
    from fastapi.testclient import TestClient

    from app.core.dependencies import get_db_session
    from app.main import app

    def _override_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db_session] = _override_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()

from __future__ import annotations

import pytest
from sqlalchemy import text

from app.core.exceptions import ConflictError, NotFoundError, PersistenceError, ValidationError
from app.models import ReturnPrepStatus, ReturnType
from app.services.client_service import ClientService


def test_onboarding_creates_personal_return_at_not_started(session, tenant):
    service = ClientService(tenant.id, db=session)
    client = service.onboard_client(" Jane@Example.com ", "Jane", "Doe", tax_year=2024)

    assert client.email == "jane@example.com"
    assert len(client.returns) == 1
    tax_return = client.returns[0]
    assert tax_return.return_type is ReturnType.PERSONAL
    assert tax_return.status is ReturnPrepStatus.NOT_STARTED
    assert tax_return.tax_year == 2024


def test_onboarding_rejects_bad_or_duplicate_email(session, tenant):
    service = ClientService(tenant.id, db=session)
    service.onboard_client("jane@example.com")
    with pytest.raises(ConflictError):
        service.onboard_client("JANE@example.com")
    with pytest.raises(ValidationError):
        service.onboard_client("not-an-email")


def test_archive_round_trip_and_directory_listing(session, tenant, admin, make_client):
    active, _ = make_client(first_name="Ann")
    archived, _ = make_client(first_name="Bob", archived=True)
    service = ClientService(tenant.id, db=session)

    assert [row.id for row in service.list_clients()] == [active.id, archived.id]
    assert [row.id for row in service.list_clients(include_archived=False)] == [active.id]

    assert service.archive(active.id).is_archived is True
    assert service.unarchive(archived.id).is_archived is False
    with pytest.raises(NotFoundError):
        service.get_client(admin.id)


def test_onboarding_storage_failure_raises_persistence_error(session, tenant):
    session.execute(
        text(
            "CREATE TRIGGER reject_new_users BEFORE INSERT ON users "
            "BEGIN SELECT RAISE(ABORT, 'disk I/O error'); END"
        )
    )
    session.commit()
    service = ClientService(tenant.id, db=session)

    with pytest.raises(PersistenceError):
        service.onboard_client("late@example.com", "Late")

    assert service.list_clients() == []

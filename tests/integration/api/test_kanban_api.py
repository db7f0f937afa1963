from __future__ import annotations

from sqlalchemy import text

from app.api.v1._authz import map_domain_error
from app.core.exceptions import (
    ConflictError,
    InvalidStageError,
    NotFoundError,
    PersistenceError,
    PortalException,
    ValidationError,
)
from app.models import ReturnPrepStatus


def test_kanban_board_and_status_update(api_client, auth_header, tenant, admin, make_client):
    _, tax_return = make_client(first_name="Ann", status=ReturnPrepStatus.INFORMATION_REVIEW)
    headers = auth_header(role="admin", tenant_id=tenant.id, user_id=admin.id)

    board = api_client.get("/api/v1/admin/kanban", headers=headers)
    assert board.status_code == 200
    body = board.json()
    assert [stage["id"] for stage in body["stages"]][-1] == "filed"
    assert body["columns"]["information_review"][0]["client_name"] == "Ann Doe"

    moved = api_client.patch(
        f"/api/v1/admin/kanban/{tax_return.id}",
        headers=headers,
        json={"status": "filing"},
    )
    assert moved.status_code == 200
    assert moved.json()["status"] == "filing"

    state = api_client.get(f"/api/v1/admin/returns/{tax_return.id}/pipeline", headers=headers).json()
    assert state["stage_id"] == "filing"
    assert state["progress"]["percent"] == 89
    assert state["progress"]["label"] == "Filing"

    history = api_client.get(f"/api/v1/admin/returns/{tax_return.id}/transitions", headers=headers).json()
    assert [(row["from_stage"], row["to_stage"]) for row in history] == [("information_review", "filing")]


def test_invalid_stage_returns_error_envelope(api_client, auth_header, tenant, admin, make_client):
    _, tax_return = make_client(status=ReturnPrepStatus.FILING)
    headers = auth_header(role="admin", tenant_id=tenant.id, user_id=admin.id)

    response = api_client.patch(
        f"/api/v1/admin/kanban/{tax_return.id}",
        headers=headers,
        json={"status": "archived"},
    )
    assert response.status_code == 422
    assert response.json()["status"] == "error"
    assert response.json()["error_code"] == "invalid_stage"

    missing = api_client.patch("/api/v1/admin/kanban/9999", headers=headers, json={"status": "filed"})
    assert missing.status_code == 404
    assert missing.json()["error_code"] == "not_found"

    bad_body = api_client.patch(f"/api/v1/admin/kanban/{tax_return.id}", headers=headers, json={})
    assert bad_body.status_code == 400
    assert bad_body.json()["error_code"] == "validation_error"


def test_kanban_requires_auth_and_staff_scope(api_client, auth_header, tenant, admin, make_client):
    user, tax_return = make_client()

    assert api_client.get("/api/v1/admin/kanban").status_code == 401
    client_headers = auth_header(role="client", tenant_id=tenant.id, user_id=user.id)
    assert api_client.get("/api/v1/admin/kanban", headers=client_headers).status_code == 403

    preparer = auth_header(role="preparer", tenant_id=tenant.id, user_id=admin.id)
    advanced = api_client.post(f"/api/v1/admin/returns/{tax_return.id}/advance", headers=preparer)
    assert advanced.status_code == 200
    assert advanced.json()["status"] == "documents_gathering"


def test_unknown_return_type_filter_is_a_bad_request(api_client, auth_header, tenant, admin):
    headers = auth_header(role="admin", tenant_id=tenant.id, user_id=admin.id)
    response = api_client.get("/api/v1/admin/kanban?type=trust", headers=headers)
    assert response.status_code == 400
    assert api_client.get("/api/v1/admin/kanban?type=business", headers=headers).status_code == 200


def test_client_sees_only_own_progress(api_client, auth_header, tenant, make_client):
    owner, tax_return = make_client(status=ReturnPrepStatus.FILED)
    stranger, _ = make_client(first_name="Eve")

    own = api_client.get(
        f"/api/v1/returns/{tax_return.id}/progress",
        headers=auth_header(role="client", tenant_id=tenant.id, user_id=owner.id),
    )
    assert own.status_code == 200
    assert own.json()["percent"] == 100
    assert own.json()["complete"] is True
    assert own.json()["refund_tracker_visible"] is True

    other = api_client.get(
        f"/api/v1/returns/{tax_return.id}/progress",
        headers=auth_header(role="client", tenant_id=tenant.id, user_id=stranger.id),
    )
    assert other.status_code == 404


def test_patch_returns_the_stored_record_and_rejections_leave_it_alone(
    api_client, auth_header, tenant, admin, make_client
):
    _, tax_return = make_client(first_name="Ben", status=ReturnPrepStatus.CLIENT_REVIEW)
    headers = auth_header(role="admin", tenant_id=tenant.id, user_id=admin.id)
    state_url = f"/api/v1/admin/returns/{tax_return.id}/pipeline"
    before = api_client.get(state_url, headers=headers).json()

    moved = api_client.patch(f"/api/v1/admin/kanban/{tax_return.id}", headers=headers, json={"status": "prep"})
    assert moved.status_code == 422
    assert moved.json()["error_code"] == "invalid_stage"
    assert api_client.get(state_url, headers=headers).json() == before

    moved = api_client.patch(
        f"/api/v1/admin/kanban/{tax_return.id}",
        headers=headers,
        json={"status": "information_review"},
    )
    assert moved.status_code == 200
    record = moved.json()
    assert record["id"] == tax_return.id
    assert record["status"] == "information_review"
    after = api_client.get(state_url, headers=headers).json()
    assert after["stage_id"] == "information_review"
    assert after["updated_at"] == record["updated_at"]

    board = api_client.get("/api/v1/admin/kanban", headers=headers).json()
    assert [card["id"] for card in board["columns"]["information_review"]] == [tax_return.id]
    assert board["columns"]["client_review"] == []


def test_storage_failure_maps_to_service_unavailable(api_client, auth_header, session, tenant, admin, make_client):
    _, tax_return = make_client(status=ReturnPrepStatus.FILING)
    headers = auth_header(role="admin", tenant_id=tenant.id, user_id=admin.id)
    session.execute(
        text(
            "CREATE TRIGGER reject_return_updates BEFORE UPDATE ON tax_returns "
            "BEGIN SELECT RAISE(ABORT, 'disk I/O error'); END"
        )
    )
    session.commit()

    response = api_client.patch(f"/api/v1/admin/kanban/{tax_return.id}", headers=headers, json={"status": "filed"})

    assert response.status_code == 503
    assert response.json() == {
        "status": "error",
        "error_code": "persistence_error",
        "detail": "Could not save changes.",
    }
    state = api_client.get(f"/api/v1/admin/returns/{tax_return.id}/pipeline", headers=headers).json()
    assert state["stage_id"] == "filing"


def test_domain_errors_map_to_http_statuses():
    assert map_domain_error(NotFoundError("missing")) == 404
    assert map_domain_error(InvalidStageError("bad")) == 422
    assert map_domain_error(ValidationError("bad")) == 400
    assert map_domain_error(ConflictError("in use")) == 409
    assert map_domain_error(PersistenceError("down")) == 503
    assert map_domain_error(PortalException("unknown")) == 500

from __future__ import annotations


def test_product_lifecycle_and_client_product_moves(api_client, auth_header, tenant, admin, make_client):
    user, _ = make_client(first_name="Ann")
    headers = auth_header(role="admin", tenant_id=tenant.id, user_id=admin.id)

    created = api_client.post(
        "/api/v1/admin/products",
        headers=headers,
        json={"name": "Bookkeeping", "stages": [{"name": "Intake"}, {"name": "Review"}, {"name": "Done"}]},
    )
    assert created.status_code == 201
    product = created.json()
    stage_ids = [stage["id"] for stage in product["stages"]]
    assert [stage["slug"] for stage in product["stages"]] == ["intake", "review", "done"]

    assigned = api_client.post(
        f"/api/v1/admin/clients/{user.id}/products",
        headers=headers,
        json={"product_id": product["id"]},
    )
    assert assigned.status_code == 201
    client_product = assigned.json()
    assert client_product["current_stage_id"] == stage_ids[0]

    moved = api_client.patch(
        f"/api/v1/admin/client-products/{client_product['id']}",
        headers=headers,
        json={"current_stage_id": stage_ids[2]},
    )
    assert moved.status_code == 200
    assert moved.json()["current_stage_id"] == stage_ids[2]

    board = api_client.get(f"/api/v1/admin/products/{product['id']}/board", headers=headers).json()
    assert [card["id"] for card in board["columns"][str(stage_ids[2])]] == [client_product["id"]]

    pipeline = api_client.get(
        f"/api/v1/admin/client-products/{client_product['id']}/pipeline",
        headers=headers,
    ).json()
    assert pipeline["progress"]["complete"] is True

    rejected = api_client.patch(
        f"/api/v1/admin/client-products/{client_product['id']}",
        headers=headers,
        json={"current_stage_id": 424242},
    )
    assert rejected.status_code == 422

    conflict = api_client.delete(f"/api/v1/admin/products/{product['id']}", headers=headers)
    assert conflict.status_code == 409
    assert conflict.json()["error_code"] == "conflict"


def test_product_update_and_portal_listing(api_client, auth_header, tenant, admin, make_client):
    user, _ = make_client()
    headers = auth_header(role="admin", tenant_id=tenant.id, user_id=admin.id)
    product = api_client.post(
        "/api/v1/admin/products",
        headers=headers,
        json={"name": "Payroll", "stages": [{"name": "Setup"}]},
    ).json()
    hidden = api_client.post(
        "/api/v1/admin/products",
        headers=headers,
        json={"name": "Retired", "is_active": False},
    ).json()

    updated = api_client.put(
        f"/api/v1/admin/products/{product['id']}",
        headers=headers,
        json={"description": "Quarterly payroll", "stages": [{"name": "Setup"}, {"name": "Run"}]},
    )
    assert updated.status_code == 200
    assert updated.json()["description"] == "Quarterly payroll"
    assert [stage["slug"] for stage in updated.json()["stages"]] == ["setup", "run"]
    assert updated.json()["stages"][0]["id"] == product["stages"][0]["id"]

    portal = api_client.get(
        "/api/v1/products",
        headers=auth_header(role="client", tenant_id=tenant.id, user_id=user.id),
    )
    assert [row["name"] for row in portal.json()] == ["Payroll"]

    deleted = api_client.delete(f"/api/v1/admin/products/{hidden['id']}", headers=headers)
    assert deleted.status_code == 204

    preparer = auth_header(role="preparer", tenant_id=tenant.id, user_id=admin.id)
    assert api_client.get("/api/v1/admin/products", headers=preparer).status_code == 200
    assert api_client.post("/api/v1/admin/products", headers=preparer, json={"name": "X"}).status_code == 403

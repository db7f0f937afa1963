from __future__ import annotations

from app.api.v1 import api_router, get_api_router
from app.main import app, create_app


def _paths(application) -> set[tuple[str, str]]:
    return {
        (method, route.path)
        for route in application.routes
        for method in getattr(route, "methods", set()) or set()
    }


def test_v1_router_is_exported_from_the_package():
    assert get_api_router() is api_router
    assert api_router.prefix == "/api/v1"


def test_application_registers_the_pipeline_routes():
    paths = _paths(create_app())

    assert ("GET", "/api/v1/admin/kanban") in paths
    assert ("PATCH", "/api/v1/admin/kanban/{return_id}") in paths
    assert ("POST", "/api/v1/admin/returns/{return_id}/advance") in paths
    assert ("PATCH", "/api/v1/admin/client-products/{client_product_id}") in paths
    assert ("GET", "/api/v1/admin/products/{product_id}/board") in paths
    assert ("GET", "/api/v1/returns/{return_id}/progress") in paths
    assert ("GET", "/api/v1/health") in paths


def test_root_and_health_respond(api_client):
    root = api_client.get("/")
    assert root.status_code == 200
    assert root.json()["api_prefix"] == "/api/v1"

    health = api_client.get("/api/v1/health")
    assert health.status_code == 200
    assert health.json()["status"] == "ok"
    assert app.title == "ClientHub"

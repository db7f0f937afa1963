"""Root API router for v1 endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from app.api.v1 import client_products, clients, dashboard, health, kanban, products, returns
from app.core.config import get_config

api_router = APIRouter(prefix=get_config().API_PREFIX)
api_router.include_router(health.router)
api_router.include_router(kanban.router)
api_router.include_router(returns.router)
api_router.include_router(products.router)
api_router.include_router(client_products.router)
api_router.include_router(clients.router)
api_router.include_router(dashboard.router)


def get_api_router() -> APIRouter:
    return api_router

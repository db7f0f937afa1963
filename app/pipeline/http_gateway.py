"""HTTP implementation of :class:`PipelineGateway` for the admin kanban board."""

from __future__ import annotations

import logging
from typing import Any

import requests

from app.core.config import get_config
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    InvalidStageError,
    NotFoundError,
    PersistenceError,
    PortalException,
)
from app.pipeline.board import BoardCard, BoardSnapshot
from app.pipeline.registry import Stage, StageId

logger = logging.getLogger(__name__)

_ERRORS_BY_STATUS: dict[int, type[PortalException]] = {
    401: AuthenticationError,
    403: AuthorizationError,
    404: NotFoundError,
    422: InvalidStageError,
}


def _error_detail(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason or f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return f"HTTP {response.status_code}"


def _parse_stage_id(raw: Any, numeric: bool) -> StageId:
    return int(raw) if numeric else str(raw)


def parse_board(payload: dict[str, Any]) -> BoardSnapshot:
    """Build a snapshot from the ``{stages, columns}`` board payload."""
    stages = [
        Stage(
            id=item["id"],
            name=item["name"],
            slug=item["slug"],
            color=item["color"],
            sort_order=int(item["sort_order"]),
        )
        for item in payload.get("stages", [])
    ]
    # JSON object keys are strings; product boards key columns by integer stage id.
    numeric = any(isinstance(stage.id, int) for stage in stages)
    columns: dict[StageId, list[BoardCard]] = {stage.id: [] for stage in stages}
    for raw_stage_id, cards in (payload.get("columns") or {}).items():
        stage_id = _parse_stage_id(raw_stage_id, numeric)
        columns[stage_id] = [
            BoardCard(
                id=int(card["id"]),
                client_id=int(card["client_id"]),
                client_name=card.get("client_name", ""),
                client_email=card.get("client_email", ""),
                title=card.get("title", ""),
                stage_id=card.get("stage_id"),
            )
            for card in cards
        ]
    return BoardSnapshot(stages=stages, columns=columns)


class HttpPipelineGateway:
    """Talks to the admin kanban endpoints.

    Without ``product_id`` the gateway drives the legacy return board; with it,
    the board of that product's client products.
    """

    def __init__(
        self,
        token: str,
        product_id: int | None = None,
        base_url: str | None = None,
        timeout_seconds: int | None = None,
        session: requests.Session | None = None,
    ) -> None:
        config = get_config()
        self.base_url = (base_url or config.PORTAL_API_URL).rstrip("/")
        self.timeout_seconds = timeout_seconds or config.PORTAL_API_TIMEOUT_SECONDS
        self.product_id = product_id
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {token}"})

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=(2, self.timeout_seconds), **kwargs)
        except requests.exceptions.RequestException as exc:
            logger.warning(
                "board.gateway.request_failed",
                extra={"event": "board.gateway.request_failed", "url": url, "error": str(exc)},
            )
            raise PersistenceError(f"Pipeline service unreachable: {exc}") from exc

        if response.status_code >= 400:
            error_cls = _ERRORS_BY_STATUS.get(response.status_code, PersistenceError)
            raise error_cls(_error_detail(response))
        try:
            return response.json()
        except ValueError as exc:
            raise PersistenceError("Pipeline service returned an invalid response.") from exc

    def fetch_board(self) -> BoardSnapshot:
        if self.product_id is None:
            return parse_board(self._request("GET", "/admin/kanban"))
        return parse_board(self._request("GET", f"/admin/products/{self.product_id}/board"))

    def update_stage(self, card_id: int, stage_id: StageId) -> dict[str, Any]:
        if self.product_id is None:
            return self._request("PATCH", f"/admin/kanban/{card_id}", json={"status": stage_id})
        return self._request(
            "PATCH",
            f"/admin/client-products/{card_id}",
            json={"current_stage_id": stage_id},
        )

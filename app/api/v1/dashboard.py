"""Admin dashboard endpoints backed by live attention signals."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from app.api.v1._authz import authorize
from app.core.dependencies import get_db_session
from app.schemas.clients import AdminStatsResponse, AttentionResponse, ClientResponse
from app.services.client_service import summarize
from app.services.signal_service import SignalService

router = APIRouter(prefix="/admin", tags=["dashboard"])


@router.get("/needs-attention", response_model=list[AttentionResponse])
def needs_attention(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[AttentionResponse]:
    user = authorize(authorization, scopes=["clients.read"])
    flagged = SignalService(user.tenant_id, db=db).needs_attention_clients()
    return [
        AttentionResponse(
            client=ClientResponse.model_validate(summarize(client)),
            unread_messages=signals.unread_messages,
            pending_documents=signals.pending_documents,
            pending_signatures=signals.pending_signatures,
        )
        for client, signals in flagged
    ]


@router.get("/stats", response_model=AdminStatsResponse)
def admin_stats(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> AdminStatsResponse:
    user = authorize(authorization, scopes=["clients.read"])
    return AdminStatsResponse.model_validate(SignalService(user.tenant_id, db=db).admin_stats())

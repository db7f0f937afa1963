"""Legacy return pipeline kanban endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.orm import Session

from app.api.v1._authz import authorize
from app.core.dependencies import get_db_session
from app.core.exceptions import ValidationError
from app.models import ReturnType
from app.schemas.pipeline import BoardResponse, ReturnStatusUpdateRequest, TaxReturnResponse
from app.services.pipeline_service import PipelineService

router = APIRouter(prefix="/admin", tags=["kanban"])


def _parse_return_type(value: str | None) -> ReturnType | None:
    if value is None or not value.strip():
        return None
    try:
        return ReturnType(value.strip().lower())
    except ValueError as exc:
        raise ValidationError(f"Unknown return type: {value}") from exc


@router.get("/kanban", response_model=BoardResponse)
def get_kanban(
    return_type: str | None = Query(default=None, alias="type"),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> BoardResponse:
    user = authorize(authorization, scopes=["pipeline.read"])
    snapshot = PipelineService(user.tenant_id, db=db).board_for_returns(_parse_return_type(return_type))
    return BoardResponse.from_snapshot(snapshot)


@router.patch("/kanban/{return_id}", response_model=TaxReturnResponse)
def update_return_status(
    return_id: int,
    payload: ReturnStatusUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> TaxReturnResponse:
    user = authorize(authorization, scopes=["pipeline.write"])
    tax_return = PipelineService(user.tenant_id, db=db).set_return_state(
        return_id,
        payload.status,
        acting_admin_id=user.user_id,
    )
    return TaxReturnResponse.model_validate(tax_return)

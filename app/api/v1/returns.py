"""Return pipeline state, progress and history endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from app.api.v1._authz import authorize
from app.core.dependencies import get_db_session
from app.core.exceptions import NotFoundError
from app.models import PipelineEntity
from app.schemas.pipeline import (
    PipelineStateResponse,
    ProgressResponse,
    TaxReturnResponse,
    TransitionResponse,
)
from app.services.pipeline_service import PipelineService

router = APIRouter(tags=["returns"])


@router.post("/admin/returns/{return_id}/advance", response_model=TaxReturnResponse)
def advance_return(
    return_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> TaxReturnResponse:
    user = authorize(authorization, scopes=["pipeline.write"])
    tax_return = PipelineService(user.tenant_id, db=db).advance_return(return_id, acting_admin_id=user.user_id)
    return TaxReturnResponse.model_validate(tax_return)


@router.get("/admin/returns/{return_id}/pipeline", response_model=PipelineStateResponse)
def get_return_pipeline(
    return_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> PipelineStateResponse:
    user = authorize(authorization, scopes=["pipeline.read"])
    service = PipelineService(user.tenant_id, db=db)
    state = service.get_return_state(return_id)
    response = PipelineStateResponse.model_validate(state)
    response.progress = ProgressResponse.model_validate(service.return_progress(return_id))
    return response


@router.get("/admin/returns/{return_id}/transitions", response_model=list[TransitionResponse])
def list_return_transitions(
    return_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[TransitionResponse]:
    user = authorize(authorization, scopes=["pipeline.read"])
    rows = PipelineService(user.tenant_id, db=db).list_transitions(PipelineEntity.RETURN, return_id)
    return [TransitionResponse.model_validate(row) for row in rows]


@router.get("/returns/{return_id}/progress", response_model=ProgressResponse)
def get_return_progress(
    return_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ProgressResponse:
    """Progress tracker for the portal; clients only see their own returns."""
    user = authorize(authorization, scopes=["portal.read"])
    service = PipelineService(user.tenant_id, db=db)
    tax_return = service.get_return(return_id)
    if user.is_client and tax_return.user_id != user.user_id:
        raise NotFoundError(f"Return not found: {return_id}")
    return ProgressResponse.model_validate(service.return_progress(tax_return.id))

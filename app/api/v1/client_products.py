"""Client product assignment and per-product pipeline endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.orm import Session

from app.api.v1._authz import authorize
from app.core.dependencies import get_db_session
from app.models import PipelineEntity
from app.schemas.pipeline import (
    ClientProductResponse,
    ClientProductStageUpdateRequest,
    PipelineStateResponse,
    ProgressResponse,
    TransitionResponse,
)
from app.schemas.products import AssignProductRequest
from app.services.pipeline_service import PipelineService
from app.services.product_service import ProductService

router = APIRouter(prefix="/admin", tags=["client-products"])


@router.post(
    "/clients/{client_id}/products",
    response_model=ClientProductResponse,
    status_code=status.HTTP_201_CREATED,
)
def assign_product(
    client_id: int,
    payload: AssignProductRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ClientProductResponse:
    user = authorize(authorization, scopes=["products.write"])
    client_product = ProductService(user.tenant_id, db=db).assign_product(
        user_id=client_id,
        product_id=payload.product_id,
        name=payload.name,
    )
    return ClientProductResponse.model_validate(client_product)


@router.patch("/client-products/{client_product_id}", response_model=ClientProductResponse)
def update_client_product_stage(
    client_product_id: int,
    payload: ClientProductStageUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ClientProductResponse:
    user = authorize(authorization, scopes=["pipeline.write"])
    client_product = PipelineService(user.tenant_id, db=db).set_product_state(
        client_product_id,
        payload.current_stage_id,
        acting_admin_id=user.user_id,
    )
    return ClientProductResponse.model_validate(client_product)


@router.get("/client-products/{client_product_id}/pipeline", response_model=PipelineStateResponse)
def get_client_product_pipeline(
    client_product_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> PipelineStateResponse:
    user = authorize(authorization, scopes=["pipeline.read"])
    service = PipelineService(user.tenant_id, db=db)
    response = PipelineStateResponse.model_validate(service.get_product_state(client_product_id))
    response.progress = ProgressResponse.model_validate(service.product_progress(client_product_id))
    return response


@router.get("/client-products/{client_product_id}/transitions", response_model=list[TransitionResponse])
def list_client_product_transitions(
    client_product_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[TransitionResponse]:
    user = authorize(authorization, scopes=["pipeline.read"])
    rows = PipelineService(user.tenant_id, db=db).list_transitions(
        PipelineEntity.CLIENT_PRODUCT, client_product_id
    )
    return [TransitionResponse.model_validate(row) for row in rows]

"""Product catalogue endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Response, status
from sqlalchemy.orm import Session

from app.api.v1._authz import authorize
from app.core.dependencies import get_db_session
from app.schemas.pipeline import BoardResponse
from app.schemas.products import ProductCreateRequest, ProductResponse, ProductUpdateRequest, StageInput
from app.services.pipeline_service import PipelineService
from app.services.product_service import ProductService, StageSpec

router = APIRouter(tags=["products"])


def _stage_specs(stages: list[StageInput] | None) -> list[StageSpec] | None:
    if stages is None:
        return None
    return [
        StageSpec(
            name=stage.name,
            slug=stage.slug,
            color=stage.color,
            show_upload_button=stage.show_upload_button,
        )
        for stage in stages
    ]


@router.get("/products", response_model=list[ProductResponse])
def list_active_products(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[ProductResponse]:
    user = authorize(authorization, scopes=["portal.read"])
    products = ProductService(user.tenant_id, db=db).list_products(active_only=True)
    return [ProductResponse.model_validate(product) for product in products]


@router.get("/admin/products", response_model=list[ProductResponse])
def list_products(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[ProductResponse]:
    user = authorize(authorization, scopes=["products.read"])
    products = ProductService(user.tenant_id, db=db).list_products()
    return [ProductResponse.model_validate(product) for product in products]


@router.post("/admin/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ProductResponse:
    user = authorize(authorization, scopes=["products.write"])
    product = ProductService(user.tenant_id, db=db).create_product(
        name=payload.name,
        stages=_stage_specs(payload.stages),
        description=payload.description,
        icon=payload.icon,
        display_location=payload.display_location,
        is_active=payload.is_active,
        sort_order=payload.sort_order,
    )
    return ProductResponse.model_validate(product)


@router.put("/admin/products/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    payload: ProductUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ProductResponse:
    user = authorize(authorization, scopes=["products.write"])
    fields = payload.model_dump(exclude={"stages"}, exclude_none=True)
    product = ProductService(user.tenant_id, db=db).update_product(
        product_id,
        stages=_stage_specs(payload.stages),
        **fields,
    )
    return ProductResponse.model_validate(product)


@router.delete("/admin/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> Response:
    user = authorize(authorization, scopes=["products.write"])
    ProductService(user.tenant_id, db=db).delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/admin/products/{product_id}/board", response_model=BoardResponse)
def get_product_board(
    product_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> BoardResponse:
    user = authorize(authorization, scopes=["pipeline.read"])
    stages = ProductService(user.tenant_id, db=db).list_stages(product_id)
    snapshot = PipelineService(user.tenant_id, db=db).board_for_product(product_id, stages=stages)
    return BoardResponse.from_snapshot(snapshot)

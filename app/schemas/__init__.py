"""Pydantic schema package for API contracts."""

from app.schemas.clients import AdminStatsResponse, AttentionResponse, ClientOnboardRequest, ClientResponse
from app.schemas.common import APIEnvelope, ErrorEnvelope
from app.schemas.pipeline import (
    BoardCardResponse,
    BoardResponse,
    ClientProductResponse,
    ClientProductStageUpdateRequest,
    PipelineStateResponse,
    ProgressResponse,
    ReturnStatusUpdateRequest,
    StageResponse,
    TaxReturnResponse,
    TimelineEntryResponse,
    TransitionResponse,
)
from app.schemas.products import (
    AssignProductRequest,
    ProductCreateRequest,
    ProductResponse,
    ProductStageResponse,
    ProductUpdateRequest,
    StageInput,
)

__all__ = [
    "APIEnvelope",
    "AdminStatsResponse",
    "AssignProductRequest",
    "AttentionResponse",
    "BoardCardResponse",
    "BoardResponse",
    "ClientOnboardRequest",
    "ClientProductResponse",
    "ClientProductStageUpdateRequest",
    "ClientResponse",
    "ErrorEnvelope",
    "PipelineStateResponse",
    "ProductCreateRequest",
    "ProductResponse",
    "ProductStageResponse",
    "ProductUpdateRequest",
    "ProgressResponse",
    "ReturnStatusUpdateRequest",
    "StageInput",
    "StageResponse",
    "TaxReturnResponse",
    "TimelineEntryResponse",
    "TransitionResponse",
]

"""Pipeline, progress and kanban board schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import ReturnPrepStatus, ReturnType


class StageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int | str
    name: str
    slug: str
    color: str
    sort_order: int


class BoardCardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    client_id: int
    client_name: str
    client_email: str = ""
    title: str
    stage_id: int | str | None = None


class BoardResponse(BaseModel):
    stages: list[StageResponse]
    columns: dict[str, list[BoardCardResponse]]

    @classmethod
    def from_snapshot(cls, snapshot) -> "BoardResponse":
        return cls(
            stages=[StageResponse.model_validate(stage) for stage in snapshot.stages],
            columns={
                str(stage_id): [BoardCardResponse.model_validate(card) for card in cards]
                for stage_id, cards in snapshot.columns.items()
            },
        )


class ReturnStatusUpdateRequest(BaseModel):
    status: str = Field(min_length=1, max_length=40)


class ClientProductStageUpdateRequest(BaseModel):
    current_stage_id: int | None = None


class TaxReturnResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    return_type: ReturnType
    name: str
    tax_year: int
    status: ReturnPrepStatus | None = None
    updated_at: datetime


class ClientProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    product_id: int
    current_stage_id: int | None = None
    name: str
    updated_at: datetime


class TimelineEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    stage: StageResponse
    status: str


class ProgressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    stage_id: int | str | None = None
    label: str
    percent: int = Field(ge=0, le=100)
    complete: bool
    timeline: list[TimelineEntryResponse]
    refund_tracker_visible: bool = False


class PipelineStateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    entity_type: str
    entity_id: int
    stage_id: int | str | None = None
    effective_stage_id: int | str | None = None
    updated_at: datetime
    progress: ProgressResponse | None = None


class TransitionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    entity_type: str
    entity_id: int
    from_stage: str | None = None
    to_stage: str
    actor_id: int | None = None
    created_at: datetime

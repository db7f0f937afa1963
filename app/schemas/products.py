"""Product catalogue request/response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class StageInput(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    slug: str | None = Field(default=None, max_length=120)
    color: str | None = Field(default=None, max_length=7)
    show_upload_button: bool = False


class ProductCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    icon: str | None = Field(default=None, max_length=60)
    display_location: str | None = Field(default=None, max_length=40)
    is_active: bool = True
    sort_order: int = 0
    stages: list[StageInput] = Field(default_factory=list)


class ProductUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    icon: str | None = Field(default=None, max_length=60)
    display_location: str | None = Field(default=None, max_length=40)
    is_active: bool | None = None
    sort_order: int | None = None
    stages: list[StageInput] | None = None


class ProductStageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    color: str
    sort_order: int
    show_upload_button: bool


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    icon: str
    display_location: str
    is_active: bool
    sort_order: int
    stages: list[ProductStageResponse] = Field(default_factory=list)
    created_at: datetime | None = None


class AssignProductRequest(BaseModel):
    product_id: int = Field(ge=1)
    name: str | None = Field(default=None, max_length=255)

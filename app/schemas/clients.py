"""Client directory and dashboard schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ClientOnboardRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    first_name: str | None = Field(default=None, max_length=120)
    last_name: str | None = Field(default=None, max_length=120)
    tax_year: int | None = Field(default=None, ge=1900, le=2100)


class ClientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    archived: bool


class AttentionResponse(BaseModel):
    client: ClientResponse
    unread_messages: int
    pending_documents: int
    pending_signatures: int


class AdminStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_clients: int
    pending_documents: int
    unread_messages: int
    pending_signatures: int

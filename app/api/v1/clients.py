"""Client directory endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.orm import Session

from app.api.v1._authz import authorize
from app.core.dependencies import get_db_session
from app.schemas.clients import ClientOnboardRequest, ClientResponse
from app.services.client_service import ClientService, summarize

router = APIRouter(prefix="/admin/clients", tags=["clients"])


@router.get("", response_model=list[ClientResponse])
def list_clients(
    include_archived: bool = Query(default=True),
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> list[ClientResponse]:
    user = authorize(authorization, scopes=["clients.read"])
    clients = ClientService(user.tenant_id, db=db).list_clients(include_archived=include_archived)
    return [ClientResponse.model_validate(client) for client in clients]


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
def onboard_client(
    payload: ClientOnboardRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ClientResponse:
    user = authorize(authorization, scopes=["clients.write"])
    client = ClientService(user.tenant_id, db=db).onboard_client(
        email=payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        tax_year=payload.tax_year,
    )
    return ClientResponse.model_validate(summarize(client))


@router.post("/{client_id}/archive", response_model=ClientResponse)
def archive_client(
    client_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ClientResponse:
    user = authorize(authorization, scopes=["clients.write"])
    client = ClientService(user.tenant_id, db=db).archive(client_id)
    return ClientResponse.model_validate(summarize(client))


@router.post("/{client_id}/unarchive", response_model=ClientResponse)
def unarchive_client(
    client_id: int,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db_session),
) -> ClientResponse:
    user = authorize(authorization, scopes=["clients.write"])
    client = ClientService(user.tenant_id, db=db).unarchive(client_id)
    return ClientResponse.model_validate(summarize(client))

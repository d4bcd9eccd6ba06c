"""
Client endpoints.
"""

from uuid import UUID

from fastapi import APIRouter, Query

from casedesk.core.dependencies import DBSession, Scope
from casedesk.models.client import ClientStatus
from casedesk.schemas.base import APIResponse, PaginatedResponse, paginate
from casedesk.schemas.client import ClientCreate, ClientResponse, ClientUpdate
from casedesk.services.client_service import ClientService

router = APIRouter(prefix="/clients", tags=["Clients"])


@router.get("", response_model=PaginatedResponse[ClientResponse])
async def list_clients(
    db: DBSession,
    scope: Scope,
    status: ClientStatus | None = None,
    search: str | None = None,
    assigned_associate_id: UUID | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
):
    clients, total = await ClientService(db, scope).list_clients(
        status=status,
        search=search,
        assigned_associate_id=assigned_associate_id,
        skip=skip,
        limit=limit,
    )
    return PaginatedResponse(
        **paginate([ClientResponse.model_validate(c) for c in clients], total, skip, limit)
    )


@router.post("", response_model=APIResponse[ClientResponse])
async def create_client(data: ClientCreate, db: DBSession, scope: Scope):
    client = await ClientService(db, scope).create(data)
    return APIResponse(
        success=True,
        data=ClientResponse.model_validate(client),
        message="Client created",
    )


@router.get("/{client_id}", response_model=APIResponse[ClientResponse])
async def get_client(client_id: UUID, db: DBSession, scope: Scope):
    client = await ClientService(db, scope).get(client_id)
    return APIResponse(success=True, data=ClientResponse.model_validate(client))


@router.put("/{client_id}", response_model=APIResponse[ClientResponse])
async def update_client(client_id: UUID, data: ClientUpdate, db: DBSession, scope: Scope):
    client = await ClientService(db, scope).update(client_id, data)
    return APIResponse(success=True, data=ClientResponse.model_validate(client))


@router.delete("/{client_id}", response_model=APIResponse[ClientResponse])
async def deactivate_client(client_id: UUID, db: DBSession, scope: Scope):
    client = await ClientService(db, scope).deactivate(client_id)
    return APIResponse(
        success=True,
        data=ClientResponse.model_validate(client),
        message="Client deactivated",
    )

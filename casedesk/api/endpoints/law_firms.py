"""
Law firm endpoints.
"""

from uuid import UUID

from fastapi import APIRouter, Query

from casedesk.core.dependencies import DBSession, Scope
from casedesk.schemas.base import APIResponse, PaginatedResponse, paginate
from casedesk.schemas.law_firm import LawFirmCreate, LawFirmResponse, LawFirmUpdate
from casedesk.services.law_firm_service import LawFirmService

router = APIRouter(prefix="/law-firms", tags=["Law firms"])


@router.get("", response_model=PaginatedResponse[LawFirmResponse])
async def list_law_firms(
    db: DBSession,
    scope: Scope,
    is_active: bool | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
):
    firms, total = await LawFirmService(db, scope).list_firms(skip=skip, limit=limit, is_active=is_active)
    return PaginatedResponse(**paginate(firms, total, skip, limit))


@router.post("", response_model=APIResponse[LawFirmResponse])
async def create_law_firm(data: LawFirmCreate, db: DBSession, scope: Scope):
    firm = await LawFirmService(db, scope).create(data)
    return APIResponse(success=True, data=firm, message="Law firm created")


@router.get("/{law_firm_id}", response_model=APIResponse[LawFirmResponse])
async def get_law_firm(law_firm_id: UUID, db: DBSession, scope: Scope):
    firm = await LawFirmService(db, scope).get_response(law_firm_id)
    return APIResponse(success=True, data=firm)


@router.put("/{law_firm_id}", response_model=APIResponse[LawFirmResponse])
async def update_law_firm(law_firm_id: UUID, data: LawFirmUpdate, db: DBSession, scope: Scope):
    firm = await LawFirmService(db, scope).update(law_firm_id, data)
    return APIResponse(success=True, data=firm)


@router.delete("/{law_firm_id}", response_model=APIResponse[LawFirmResponse])
async def deactivate_law_firm(law_firm_id: UUID, db: DBSession, scope: Scope):
    firm = await LawFirmService(db, scope).deactivate(law_firm_id)
    return APIResponse(success=True, data=firm, message="Law firm deactivated")

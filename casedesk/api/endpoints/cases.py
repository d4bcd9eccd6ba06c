"""
Case endpoints.
"""

from datetime import date
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Query

from casedesk.core.dependencies import DBSession, Scope
from casedesk.models.case import CasePriority, CaseStatus
from casedesk.schemas.base import APIResponse, PaginatedResponse, paginate
from casedesk.schemas.case import (
    CaseActivityResponse,
    CaseCreate,
    CaseDetailResponse,
    CaseResponse,
    CaseUpdate,
    UpcomingDeadline,
)
from casedesk.schemas.event import EventResponse
from casedesk.services.case_service import CaseService
from casedesk.services.event_service import EventService

router = APIRouter(prefix="/cases", tags=["Cases"])


@router.get("", response_model=PaginatedResponse[CaseResponse])
async def list_cases(
    db: DBSession,
    scope: Scope,
    status: CaseStatus | None = None,
    priority: CasePriority | None = None,
    search: str | None = None,
    client_id: UUID | None = None,
    assigned_to_user_id: UUID | None = None,
    deadline_from: date | None = None,
    deadline_to: date | None = None,
    order: Literal["date_opened", "deadline", "recent", "updated"] = "date_opened",
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
):
    """Cases of the caller's firm; client accounts only get their own."""
    cases, total = await CaseService(db, scope).list_cases(
        status=status,
        priority=priority,
        search=search,
        client_id=client_id,
        assigned_to_user_id=assigned_to_user_id,
        deadline_from=deadline_from,
        deadline_to=deadline_to,
        order=order,
        skip=skip,
        limit=limit,
    )
    return PaginatedResponse(
        **paginate([CaseResponse.model_validate(c) for c in cases], total, skip, limit)
    )


@router.post("", response_model=APIResponse[CaseResponse])
async def create_case(data: CaseCreate, db: DBSession, scope: Scope):
    case = await CaseService(db, scope).create(data)
    return APIResponse(
        success=True,
        data=CaseResponse.model_validate(case),
        message="Case created",
    )


@router.get("/upcoming-deadlines", response_model=APIResponse[list[UpcomingDeadline]])
async def upcoming_deadlines(
    db: DBSession,
    scope: Scope,
    days: int = Query(30, ge=1, le=365),
    assigned_to_user_id: UUID | None = None,
    limit: int = Query(10, ge=1, le=100),
):
    """Open cases with a deadline in the next ``days`` days, soonest first."""
    deadlines = await CaseService(db, scope).upcoming_deadlines(
        days=days,
        assigned_to_user_id=assigned_to_user_id,
        limit=limit,
    )
    return APIResponse(success=True, data=deadlines)


@router.get("/{case_id}", response_model=APIResponse[CaseDetailResponse])
async def get_case(case_id: UUID, db: DBSession, scope: Scope):
    detail = await CaseService(db, scope).get_detail(case_id)
    return APIResponse(success=True, data=detail)


@router.put("/{case_id}", response_model=APIResponse[CaseResponse])
async def update_case(case_id: UUID, data: CaseUpdate, db: DBSession, scope: Scope):
    """Partial update: only the fields sent are changed."""
    case = await CaseService(db, scope).update(case_id, data)
    return APIResponse(success=True, data=CaseResponse.model_validate(case))


@router.delete("/{case_id}", response_model=APIResponse[None])
async def delete_case(case_id: UUID, db: DBSession, scope: Scope):
    await CaseService(db, scope).delete(case_id)
    return APIResponse(success=True, message="Case deleted")


@router.get("/{case_id}/activities", response_model=APIResponse[list[CaseActivityResponse]])
async def case_activities(
    case_id: UUID,
    db: DBSession,
    scope: Scope,
    limit: int = Query(50, ge=1, le=200),
):
    activities = await CaseService(db, scope).activities(case_id, limit)
    return APIResponse(
        success=True,
        data=[CaseActivityResponse.model_validate(a) for a in activities],
    )


@router.get("/{case_id}/events", response_model=APIResponse[list[EventResponse]])
async def case_events(case_id: UUID, db: DBSession, scope: Scope):
    events = await EventService(db, scope).for_case(case_id)
    return APIResponse(success=True, data=[EventResponse.model_validate(e) for e in events])

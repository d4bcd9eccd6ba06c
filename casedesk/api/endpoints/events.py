"""
Calendar endpoints.
"""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Path, Query

from casedesk.core.dependencies import DBSession, Scope
from casedesk.models.event import EventType
from casedesk.schemas.base import APIResponse
from casedesk.schemas.event import EventCreate, EventResponse, EventUpdate
from casedesk.services.event_service import EventService

router = APIRouter(prefix="/events", tags=["Events"])


def _many(events) -> APIResponse[list[EventResponse]]:
    return APIResponse(success=True, data=[EventResponse.model_validate(e) for e in events])


@router.get("", response_model=APIResponse[list[EventResponse]])
async def list_events(
    db: DBSession,
    scope: Scope,
    status: str | None = Query(None, description="Comma separated, e.g. scheduled,confirmed"),
    event_type: EventType | None = None,
    case_id: UUID | None = None,
    assigned_to_user_id: UUID | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    search: str | None = None,
    upcoming: bool = False,
    past: bool = False,
    limit: int | None = Query(None, ge=1, le=500),
):
    events = await EventService(db, scope).list_events(
        status=status,
        event_type=event_type,
        case_id=case_id,
        assigned_to_user_id=assigned_to_user_id,
        start_date=start_date,
        end_date=end_date,
        search=search,
        upcoming=upcoming,
        past=past,
        limit=limit,
    )
    return _many(events)


@router.get("/upcoming", response_model=APIResponse[list[EventResponse]])
async def upcoming_events(
    db: DBSession,
    scope: Scope,
    days: int = Query(7, ge=1, le=365),
    limit: int = Query(20, ge=1, le=200),
):
    return _many(await EventService(db, scope).upcoming(days=days, limit=limit))


@router.get("/today", response_model=APIResponse[list[EventResponse]])
async def todays_events(db: DBSession, scope: Scope):
    return _many(await EventService(db, scope).today())


@router.get("/calendar/{year}/{month}", response_model=APIResponse[list[EventResponse]])
async def calendar_month(
    db: DBSession,
    scope: Scope,
    year: int = Path(..., ge=1970, le=9999),
    month: int = Path(..., ge=1, le=12),
):
    return _many(await EventService(db, scope).calendar_month(year, month))


@router.post("", response_model=APIResponse[EventResponse])
async def create_event(data: EventCreate, db: DBSession, scope: Scope):
    event = await EventService(db, scope).create(data)
    return APIResponse(success=True, data=EventResponse.model_validate(event), message="Event created")


@router.get("/{event_id}", response_model=APIResponse[EventResponse])
async def get_event(event_id: UUID, db: DBSession, scope: Scope):
    event = await EventService(db, scope).get(event_id)
    return APIResponse(success=True, data=EventResponse.model_validate(event))


@router.put("/{event_id}", response_model=APIResponse[EventResponse])
async def update_event(event_id: UUID, data: EventUpdate, db: DBSession, scope: Scope):
    event = await EventService(db, scope).update(event_id, data)
    return APIResponse(success=True, data=EventResponse.model_validate(event))


@router.delete("/{event_id}", response_model=APIResponse[None])
async def delete_event(event_id: UUID, db: DBSession, scope: Scope):
    await EventService(db, scope).delete(event_id)
    return APIResponse(success=True, message="Event deleted")


@router.post("/{event_id}/confirm", response_model=APIResponse[EventResponse])
async def confirm_event(event_id: UUID, db: DBSession, scope: Scope):
    """An invited client confirms attendance."""
    event = await EventService(db, scope).confirm(event_id)
    return APIResponse(success=True, data=EventResponse.model_validate(event))

"""
Calendar event service.

All times are stored and compared in UTC. Client accounts see the events
of their own cases they were invited to, and can confirm attendance.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import structlog
from sqlalchemy import ColumnElement
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.core.config import settings
from casedesk.core.exceptions import (
    BusinessRuleError,
    InsufficientPermissionsError,
    ResourceNotFoundError,
    ValidationError,
)
from casedesk.core.permissions import AccessScope
from casedesk.db.base import utcnow
from casedesk.models.event import ACTIVE_EVENT_STATUSES, Event, EventStatus, EventType
from casedesk.repositories.case_repository import CaseRepository
from casedesk.repositories.event_repository import EventRepository
from casedesk.repositories.user_repository import UserRepository
from casedesk.schemas.base import as_utc, changes
from casedesk.schemas.event import EventCreate, EventUpdate

logger = structlog.get_logger()

CLEARABLE_FIELDS = (
    "description",
    "location",
    "meeting_link",
    "case_id",
    "assigned_to_user_id",
    "reminder_minutes_before",
)


def parse_statuses(raw: str | None) -> list[EventStatus]:
    """``"scheduled,confirmed"`` -> members; unknown names are a validation error."""
    if not raw:
        return []
    statuses = []
    for part in raw.split(","):
        name = part.strip().lower()
        if not name:
            continue
        try:
            statuses.append(EventStatus(name))
        except ValueError:
            raise ValidationError(f"Unknown event status: {name}", field="status")
    return statuses


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end


def day_bounds(now: datetime) -> tuple[datetime, datetime]:
    start = now.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


class EventService:
    def __init__(self, db: AsyncSession, scope: AccessScope):
        self._db = db
        self._scope = scope
        self._law_firm_id = scope.require_law_firm()
        self._repo = EventRepository(db, self._law_firm_id)
        self._case_repo = CaseRepository(db, self._law_firm_id)

    def visibility(self) -> list[ColumnElement[bool]]:
        if not self._scope.is_client:
            return []
        if self._scope.client_id is None:
            return [Event.id.is_(None)]
        return [
            Event.client_invited.is_(True),
            Event.case_id.in_(self._case_repo.client_case_ids(self._scope.client_id)),
        ]

    async def _check_case(self, case_id: UUID | None) -> None:
        if case_id is not None and await self._case_repo.get_by_id(case_id) is None:
            raise ResourceNotFoundError("Case", case_id)

    async def _check_assignee(self, user_id: UUID | None) -> None:
        if user_id is None:
            return
        if await UserRepository(self._db).get_in_firm(user_id, self._law_firm_id) is None:
            raise ResourceNotFoundError("User", user_id)

    async def get(self, event_id: UUID) -> Event:
        events = await self._repo.find(Event.id == event_id, *self.visibility(), limit=1)
        if not events:
            raise ResourceNotFoundError("Event", event_id)
        return events[0]

    async def list_events(
        self,
        status: str | None = None,
        event_type: EventType | None = None,
        case_id: UUID | None = None,
        assigned_to_user_id: UUID | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        search: str | None = None,
        upcoming: bool = False,
        past: bool = False,
        limit: int | None = None,
    ) -> list[Event]:
        now = utcnow()
        return await self._repo.search(
            *self.visibility(),
            statuses=parse_statuses(status),
            event_type=event_type,
            case_id=case_id,
            assigned_to_user_id=assigned_to_user_id,
            start_date=as_utc(start_date),
            end_date=as_utc(end_date),
            search=search,
            upcoming_after=now if upcoming else None,
            past_before=now if past else None,
            limit=limit,
        )

    async def upcoming(self, days: int | None = None, limit: int | None = 20) -> list[Event]:
        """Scheduled or confirmed events starting within the next ``days`` days."""
        now = utcnow()
        return await self._repo.search(
            *self.visibility(),
            statuses=list(ACTIVE_EVENT_STATUSES),
            start_date=now,
            end_date=now + timedelta(days=days or settings.UPCOMING_EVENT_DAYS),
            limit=limit,
        )

    async def today(self) -> list[Event]:
        start, end = day_bounds(utcnow())
        return await self._repo.search(
            *self.visibility(),
            statuses=list(ACTIVE_EVENT_STATUSES),
            start_date=start,
            end_date=end,
        )

    async def calendar_month(self, year: int, month: int) -> list[Event]:
        start, end = month_bounds(year, month)
        return await self._repo.search(*self.visibility(), start_date=start, end_date=end)

    async def for_case(self, case_id: UUID) -> list[Event]:
        case = await self._case_repo.get_by_id(case_id)
        if case is None or (self._scope.is_client and case.client_id != self._scope.client_id):
            raise ResourceNotFoundError("Case", case_id)
        return await self._repo.search(*self.visibility(), case_id=case.id)

    async def create(self, data: EventCreate) -> Event:
        self._scope.require_editor("schedule events")
        await self._check_case(data.case_id)
        await self._check_assignee(data.assigned_to_user_id)

        event = await self._repo.create(**data.model_dump(), created_by_user_id=self._scope.user_id)
        logger.info(
            "event created",
            event_id=str(event.id),
            event_type=event.event_type.value,
            start_time=event.start_time.isoformat(),
        )
        return event

    async def update(self, event_id: UUID, data: EventUpdate) -> Event:
        self._scope.require_editor("update events")
        event = await self.get(event_id)

        values = changes(data, clearable=CLEARABLE_FIELDS)
        if values.get("case_id") is not None:
            await self._check_case(values["case_id"])
        await self._check_assignee(values.get("assigned_to_user_id"))

        start = values.get("start_time", as_utc(event.start_time))
        end = values.get("end_time", as_utc(event.end_time))
        if end < start:
            raise ValidationError("end_time must not be before start_time", field="end_time")

        event = await self._repo.update(event, **values)
        logger.info("event updated", event_id=str(event.id), fields=list(values))
        return event

    async def delete(self, event_id: UUID) -> None:
        self._scope.require_editor("delete events")
        event = await self.get(event_id)
        await self._repo.delete(event)
        logger.info("event deleted", event_id=str(event_id))

    async def confirm(self, event_id: UUID) -> Event:
        """An invited client confirms attendance."""
        if not self._scope.is_client:
            raise InsufficientPermissionsError("confirm attendance")
        event = await self.get(event_id)
        if event.status not in ACTIVE_EVENT_STATUSES:
            raise BusinessRuleError(
                f"Cannot confirm an event that is {event.status.value}",
                rule="EVENT_NOT_ACTIVE",
            )

        event = await self._repo.update(
            event,
            client_confirmed=True,
            status=EventStatus.CONFIRMED,
        )
        logger.info("event confirmed by client", event_id=str(event.id), client_id=str(self._scope.client_id))
        return event

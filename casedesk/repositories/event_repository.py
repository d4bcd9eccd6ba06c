"""
Calendar event repository.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import ColumnElement, or_
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.models.event import ACTIVE_EVENT_STATUSES, Event, EventStatus, EventType
from casedesk.repositories.base import MultiTenantRepository


class EventRepository(MultiTenantRepository[Event]):
    def __init__(self, db: AsyncSession, law_firm_id: UUID):
        super().__init__(Event, db, law_firm_id)

    async def search(
        self,
        *scope: ColumnElement[bool],
        statuses: list[EventStatus] | None = None,
        event_type: EventType | None = None,
        case_id: UUID | None = None,
        assigned_to_user_id: UUID | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        search: str | None = None,
        upcoming_after: datetime | None = None,
        past_before: datetime | None = None,
        limit: int | None = None,
    ) -> list[Event]:
        criteria = list(scope)
        if statuses:
            criteria.append(Event.status.in_(statuses))
        if event_type is not None:
            criteria.append(Event.event_type == event_type)
        if case_id is not None:
            criteria.append(Event.case_id == case_id)
        if assigned_to_user_id is not None:
            criteria.append(Event.assigned_to_user_id == assigned_to_user_id)
        if start_date is not None:
            criteria.append(Event.start_time >= start_date)
        if end_date is not None:
            criteria.append(Event.start_time < end_date)
        if upcoming_after is not None:
            criteria.append(Event.start_time >= upcoming_after)
        if past_before is not None:
            criteria.append(Event.end_time < past_before)
        if search:
            term = f"%{search}%"
            criteria.append(
                or_(
                    Event.title.ilike(term),
                    Event.description.ilike(term),
                    Event.location.ilike(term),
                )
            )

        order = Event.start_time.desc() if past_before is not None else Event.start_time.asc()
        return await self.find(*criteria, order_by=(order,), limit=limit)

    async def count_between(
        self,
        start: datetime,
        end: datetime,
        assigned_to_user_id: UUID | None = None,
    ) -> int:
        criteria = [
            Event.start_time >= start,
            Event.start_time < end,
            Event.status.in_(ACTIVE_EVENT_STATUSES),
        ]
        if assigned_to_user_id is not None:
            criteria.append(Event.assigned_to_user_id == assigned_to_user_id)
        return await self.count(*criteria)

"""
Case and case activity repositories.
"""

from datetime import date, timedelta
from uuid import UUID

from sqlalchemy import Select, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.models.case import (
    CLOSED_CASE_STATUSES,
    OPEN_CASE_STATUSES,
    Case,
    CaseActivity,
    CasePriority,
    CaseStatus,
)
from casedesk.models.client import Client
from casedesk.models.document import Document
from casedesk.models.event import Event
from casedesk.models.invoice import Invoice
from casedesk.models.note import Note
from casedesk.repositories.base import MultiTenantRepository

CASE_ORDERINGS = {
    "date_opened": (Case.date_opened.desc(), Case.created_at.desc()),
    "deadline": (Case.deadline.is_(None), Case.deadline.asc(), Case.created_at.desc()),
    "recent": (Case.created_at.desc(),),
    "updated": (Case.updated_at.desc(),),
}


class CaseRepository(MultiTenantRepository[Case]):
    def __init__(self, db: AsyncSession, law_firm_id: UUID):
        super().__init__(Case, db, law_firm_id)

    async def search(
        self,
        client_id: UUID | None = None,
        status: CaseStatus | None = None,
        priority: CasePriority | None = None,
        assigned_to_user_id: UUID | None = None,
        search: str | None = None,
        deadline_from: date | None = None,
        deadline_to: date | None = None,
        order: str = "date_opened",
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[list[Case], int]:
        """Filtered case list plus the unpaginated total."""
        criteria = []
        if client_id is not None:
            criteria.append(Case.client_id == client_id)
        if status is not None:
            criteria.append(Case.status == status)
        if priority is not None:
            criteria.append(Case.priority == priority)
        if assigned_to_user_id is not None:
            criteria.append(Case.assigned_to_user_id == assigned_to_user_id)
        if deadline_from is not None:
            criteria.append(Case.deadline >= deadline_from)
        if deadline_to is not None:
            criteria.append(Case.deadline <= deadline_to)
        if search:
            term = f"%{search}%"
            client_names = select(Client.id).where(
                Client.law_firm_id == self.law_firm_id,
                Client.name.ilike(term),
            )
            criteria.append(
                or_(
                    Case.title.ilike(term),
                    Case.case_number.ilike(term),
                    Case.file_number.ilike(term),
                    Case.client_id.in_(client_names),
                )
            )

        cases = await self.find(
            *criteria,
            order_by=CASE_ORDERINGS.get(order, CASE_ORDERINGS["date_opened"]),
            skip=skip,
            limit=limit,
        )
        return cases, await self.count(*criteria)

    async def upcoming_deadlines(
        self,
        days: int,
        client_id: UUID | None = None,
        assigned_to_user_id: UUID | None = None,
        limit: int = 10,
    ) -> list[Case]:
        """Open cases whose deadline falls between today and ``days`` from now."""
        today = date.today()
        criteria = [
            Case.status.in_(OPEN_CASE_STATUSES),
            Case.deadline.is_not(None),
            Case.deadline >= today,
            Case.deadline <= today + timedelta(days=days),
        ]
        if client_id is not None:
            criteria.append(Case.client_id == client_id)
        if assigned_to_user_id is not None:
            criteria.append(Case.assigned_to_user_id == assigned_to_user_id)
        return await self.find(*criteria, order_by=(Case.deadline.asc(),), limit=limit)

    def client_case_ids(self, client_id: UUID) -> Select:
        """Subquery of the case ids a client is party to."""
        return select(Case.id).where(
            Case.law_firm_id == self.law_firm_id,
            Case.client_id == client_id,
        )

    async def status_counts(self, client_id: UUID | None = None) -> dict[CaseStatus, int]:
        query = (
            select(Case.status, func.count())
            .where(Case.law_firm_id == self.law_firm_id)
            .group_by(Case.status)
        )
        if client_id is not None:
            query = query.where(Case.client_id == client_id)
        result = await self.db.execute(query)
        return {row[0]: row[1] for row in result.all()}

    async def count_high_priority_open(self) -> int:
        return await self.count(
            Case.priority == CasePriority.HIGH,
            Case.status.in_(OPEN_CASE_STATUSES),
        )

    async def count_closed(self, client_id: UUID | None = None) -> int:
        criteria = [Case.status.in_(CLOSED_CASE_STATUSES)]
        if client_id is not None:
            criteria.append(Case.client_id == client_id)
        return await self.count(*criteria)

    async def delete_case(self, case: Case) -> None:
        """
        Remove a case.

        Documents, notes and invoices outlive the case with ``case_id``
        cleared; events and the activity feed go with it.
        """
        for model in (Document, Note, Invoice):
            await self.db.execute(
                update(model).where(model.case_id == case.id).values(case_id=None)
            )
        await self.db.execute(delete(Event).where(Event.case_id == case.id))
        await self.db.execute(delete(CaseActivity).where(CaseActivity.case_id == case.id))
        await self.db.delete(case)
        await self.db.commit()


class CaseActivityRepository(MultiTenantRepository[CaseActivity]):
    def __init__(self, db: AsyncSession, law_firm_id: UUID):
        super().__init__(CaseActivity, db, law_firm_id)

    def add(self, case_id: UUID, user_id: UUID | None, action: str, description: str) -> CaseActivity:
        """Stage an entry in the current transaction without committing."""
        activity = CaseActivity(
            law_firm_id=self.law_firm_id,
            case_id=case_id,
            user_id=user_id,
            action=action,
            description=description,
        )
        self.db.add(activity)
        return activity

    async def get_by_case(self, case_id: UUID, limit: int = 50) -> list[CaseActivity]:
        return await self.find(
            CaseActivity.case_id == case_id,
            order_by=(CaseActivity.created_at.desc(),),
            limit=limit,
        )

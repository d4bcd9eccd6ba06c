"""
Invoice repository.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import ColumnElement, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from casedesk.models.invoice import OUTSTANDING_STATUSES, Invoice, InvoiceStatus
from casedesk.repositories.base import MultiTenantRepository


class InvoiceRepository(MultiTenantRepository[Invoice]):
    def __init__(self, db: AsyncSession, law_firm_id: UUID):
        super().__init__(Invoice, db, law_firm_id)

    def query(self, *criteria: ColumnElement[bool]):
        return super().query(*criteria).options(selectinload(Invoice.line_items))

    async def reload(self, invoice_id: UUID) -> Invoice:
        """Fetch again after a write so line items reflect what was stored."""
        result = await self.db.execute(
            self.query(Invoice.id == invoice_id).execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def get_by_number(self, invoice_number: str) -> Invoice | None:
        result = await self.db.execute(self.query(Invoice.invoice_number == invoice_number))
        return result.scalar_one_or_none()

    async def search(
        self,
        client_id: UUID | None = None,
        case_id: UUID | None = None,
        status: InvoiceStatus | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[list[Invoice], int]:
        criteria = []
        if client_id is not None:
            criteria.append(Invoice.client_id == client_id)
        if case_id is not None:
            criteria.append(Invoice.case_id == case_id)
        if status is not None:
            criteria.append(Invoice.status == status)
        if search:
            term = f"%{search}%"
            criteria.append(
                or_(Invoice.invoice_number.ilike(term), Invoice.description.ilike(term))
            )

        invoices = await self.find(
            *criteria,
            order_by=(Invoice.issue_date.desc(), Invoice.created_at.desc()),
            skip=skip,
            limit=limit,
        )
        return invoices, await self.count(*criteria)

    async def count_by_status(self, client_id: UUID | None = None) -> dict[InvoiceStatus, int]:
        query = (
            select(Invoice.status, func.count())
            .where(Invoice.law_firm_id == self.law_firm_id)
            .group_by(Invoice.status)
        )
        if client_id is not None:
            query = query.where(Invoice.client_id == client_id)
        result = await self.db.execute(query)
        return {row[0]: row[1] for row in result.all()}

    async def sum_amount(
        self,
        statuses: tuple[InvoiceStatus, ...] | None = None,
        client_id: UUID | None = None,
    ) -> Decimal:
        query = select(func.coalesce(func.sum(Invoice.amount), 0)).where(
            Invoice.law_firm_id == self.law_firm_id
        )
        if statuses is not None:
            query = query.where(Invoice.status.in_(statuses))
        if client_id is not None:
            query = query.where(Invoice.client_id == client_id)
        result = await self.db.execute(query)
        return Decimal(str(result.scalar_one())).quantize(Decimal("0.01"))

    async def outstanding(self, limit: int = 10) -> list[Invoice]:
        return await self.find(
            Invoice.status.in_(OUTSTANDING_STATUSES),
            order_by=(Invoice.due_date.is_(None), Invoice.due_date.asc()),
            limit=limit,
        )

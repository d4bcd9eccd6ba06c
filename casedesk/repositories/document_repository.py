"""
Document repository.
"""

from uuid import UUID

from sqlalchemy import ColumnElement, Select, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.models.document import PENDING_STATUSES, Document, DocumentStatus
from casedesk.models.invoice import Invoice
from casedesk.repositories.base import MultiTenantRepository


class DocumentRepository(MultiTenantRepository[Document]):
    def __init__(self, db: AsyncSession, law_firm_id: UUID):
        super().__init__(Document, db, law_firm_id)

    @staticmethod
    def visible_to_client(case_ids: Select, user_id: UUID) -> ColumnElement[bool]:
        """Documents of the client's cases, plus anything the client uploaded."""
        return or_(
            Document.case_id.in_(case_ids),
            Document.uploaded_by_user_id == user_id,
        )

    async def search(
        self,
        *scope: ColumnElement[bool],
        case_id: UUID | None = None,
        status: DocumentStatus | None = None,
        document_type: str | None = None,
        uploaded_by_user_id: UUID | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[list[Document], int]:
        criteria = list(scope)
        if case_id is not None:
            criteria.append(Document.case_id == case_id)
        if status is not None:
            criteria.append(Document.status == status)
        if document_type:
            criteria.append(Document.document_type == document_type)
        if uploaded_by_user_id is not None:
            criteria.append(Document.uploaded_by_user_id == uploaded_by_user_id)
        if search:
            term = f"%{search}%"
            criteria.append(
                or_(
                    Document.name.ilike(term),
                    Document.file_name.ilike(term),
                    Document.description.ilike(term),
                )
            )

        documents = await self.find(
            *criteria,
            order_by=(Document.uploaded_at.desc(), Document.created_at.desc()),
            skip=skip,
            limit=limit,
        )
        return documents, await self.count(*criteria)

    async def get_by_case(self, case_id: UUID) -> list[Document]:
        return await self.find(
            Document.case_id == case_id,
            order_by=(Document.uploaded_at.desc(),),
            limit=None,
        )

    async def count_pending(self, *scope: ColumnElement[bool]) -> int:
        return await self.count(*scope, Document.status.in_(PENDING_STATUSES))

    async def total_bytes(self) -> int:
        result = await self.db.execute(
            select(func.coalesce(func.sum(Document.file_size), 0)).where(
                Document.law_firm_id == self.law_firm_id
            )
        )
        return int(result.scalar_one())

    async def delete_document(self, document: Document) -> None:
        """Delete the row; invoices using it as payment proof lose the link."""
        await self.db.execute(
            update(Invoice)
            .where(Invoice.payment_proof_document_id == document.id)
            .values(payment_proof_document_id=None)
        )
        await self.db.delete(document)
        await self.db.commit()

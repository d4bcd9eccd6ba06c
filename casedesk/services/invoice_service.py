"""
Invoice service.

Invoices are issued by staff and paid outside the system: the client
uploads a payment proof, and a staff member approves or rejects it.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.core.config import settings
from casedesk.core.exceptions import (
    BusinessRuleError,
    InsufficientPermissionsError,
    ResourceAlreadyExistsError,
    ResourceNotFoundError,
)
from casedesk.core.permissions import AccessScope
from casedesk.core.storage import StorageService
from casedesk.db.base import utcnow
from casedesk.models.document import PAYMENT_PROOF_TYPE, DocumentStatus
from casedesk.models.invoice import Invoice, InvoiceLineItem, InvoiceStatus
from casedesk.repositories.case_repository import CaseRepository
from casedesk.repositories.client_repository import ClientRepository
from casedesk.repositories.document_repository import DocumentRepository
from casedesk.repositories.invoice_repository import InvoiceRepository
from casedesk.repositories.user_repository import UserRepository
from casedesk.schemas.base import changes
from casedesk.schemas.invoice import InvoiceCreate, InvoiceUpdate, LineItemIn, PaymentReview
from casedesk.services.document_service import DocumentService

logger = structlog.get_logger()

CENT = Decimal("0.01")
CLEARABLE_FIELDS = ("case_id", "assigned_to_user_id", "description", "due_date", "paid_date")


def build_line_items(items: list[LineItemIn]) -> tuple[list[InvoiceLineItem], Decimal]:
    """Line item rows with ``amount = hours x rate`` and their total."""
    rows = []
    total = Decimal("0")
    for position, item in enumerate(items):
        amount = (item.hours * item.rate).quantize(CENT, rounding=ROUND_HALF_UP)
        rows.append(
            InvoiceLineItem(
                position=position,
                description=item.description,
                hours=item.hours,
                rate=item.rate,
                amount=amount,
            )
        )
        total += amount
    return rows, total


class InvoiceService:
    def __init__(self, db: AsyncSession, scope: AccessScope, storage: StorageService):
        self._db = db
        self._scope = scope
        self._storage = storage
        self._law_firm_id = scope.require_law_firm()
        self._repo = InvoiceRepository(db, self._law_firm_id)

    async def _check_references(
        self,
        client_id: UUID,
        case_id: UUID | None,
        assigned_to_user_id: UUID | None,
    ) -> None:
        if await ClientRepository(self._db, self._law_firm_id).get_by_id(client_id) is None:
            raise ResourceNotFoundError("Client", client_id)

        if case_id is not None:
            case = await CaseRepository(self._db, self._law_firm_id).get_by_id(case_id)
            if case is None:
                raise ResourceNotFoundError("Case", case_id)
            if case.client_id != client_id:
                raise BusinessRuleError("Case belongs to a different client", rule="CASE_CLIENT_MISMATCH")

        if assigned_to_user_id is not None:
            user = await UserRepository(self._db).get_in_firm(assigned_to_user_id, self._law_firm_id)
            if user is None:
                raise ResourceNotFoundError("User", assigned_to_user_id)

    async def _ensure_unique(self, invoice_number: str, invoice_id: UUID | None = None) -> None:
        existing = await self._repo.get_by_number(invoice_number)
        if existing and existing.id != invoice_id:
            raise ResourceAlreadyExistsError("Invoice", "invoice_number", invoice_number)

    async def get(self, invoice_id: UUID) -> Invoice:
        invoice = await self._repo.get_by_id(invoice_id)
        if invoice is None:
            raise ResourceNotFoundError("Invoice", invoice_id)
        if self._scope.is_client and invoice.client_id != self._scope.client_id:
            raise ResourceNotFoundError("Invoice", invoice_id)
        return invoice

    async def list_invoices(
        self,
        status: InvoiceStatus | None = None,
        client_id: UUID | None = None,
        case_id: UUID | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[list[Invoice], int]:
        if self._scope.is_client:
            if self._scope.client_id is None:
                return [], 0
            client_id = self._scope.client_id

        return await self._repo.search(
            client_id=client_id,
            case_id=case_id,
            status=status,
            search=search,
            skip=skip,
            limit=limit,
        )

    async def create(self, data: InvoiceCreate) -> Invoice:
        self._scope.require_editor("create invoices")
        await self._ensure_unique(data.invoice_number)
        await self._check_references(data.client_id, data.case_id, data.assigned_to_user_id)

        values = data.model_dump(exclude={"line_items"}, exclude_none=True)
        if data.line_items:
            values["line_items"], values["amount"] = build_line_items(data.line_items)
        if data.status == InvoiceStatus.PAID:
            values.setdefault("paid_date", date.today())

        invoice = await self._repo.create(**values, created_by_user_id=self._scope.user_id)
        invoice = await self._repo.reload(invoice.id)

        logger.info(
            "invoice created",
            invoice_id=str(invoice.id),
            invoice_number=invoice.invoice_number,
            amount=str(invoice.amount),
        )
        return invoice

    async def update(self, invoice_id: UUID, data: InvoiceUpdate) -> Invoice:
        """Partial update; a given ``line_items`` list replaces the old one and the amount."""
        self._scope.require_editor("update invoices")
        invoice = await self.get(invoice_id)

        values = changes(data, clearable=CLEARABLE_FIELDS, exclude={"line_items"})
        if "invoice_number" in values:
            await self._ensure_unique(values["invoice_number"], invoice.id)
        await self._check_references(
            invoice.client_id,
            values.get("case_id", invoice.case_id),
            values.get("assigned_to_user_id"),
        )
        if data.line_items is not None:
            values["line_items"], values["amount"] = build_line_items(data.line_items)
        if values.get("status") == InvoiceStatus.PAID and not (values.get("paid_date") or invoice.paid_date):
            values["paid_date"] = date.today()

        await self._repo.update(invoice, **values)
        invoice = await self._repo.reload(invoice.id)
        logger.info("invoice updated", invoice_id=str(invoice.id), fields=list(values))
        return invoice

    async def delete(self, invoice_id: UUID) -> None:
        self._scope.require_editor("delete invoices")
        invoice = await self.get(invoice_id)

        await self._repo.delete(invoice)
        logger.info("invoice deleted", invoice_id=str(invoice_id))

    async def upload_payment_proof(
        self,
        invoice_id: UUID,
        content: bytes,
        file_name: str,
        mime_type: str,
    ) -> Invoice:
        """Attach a client's proof of payment; it waits under review for staff."""
        if not self._scope.is_client:
            raise InsufficientPermissionsError("upload payment proofs")
        invoice = await self.get(invoice_id)
        if invoice.status == InvoiceStatus.PAID:
            raise BusinessRuleError("Invoice is already paid", rule="INVOICE_PAID")

        document = await DocumentService(self._db, self._scope, self._storage).upload(
            content,
            file_name=file_name,
            mime_type=mime_type,
            name=f"Payment proof {invoice.invoice_number}",
            case_id=invoice.case_id,
            document_type=PAYMENT_PROOF_TYPE,
            status=DocumentStatus.UNDER_REVIEW,
            max_size_mb=settings.MAX_PAYMENT_PROOF_SIZE_MB,
            prefix="payment-proofs",
        )

        await self._repo.update(invoice, payment_proof_document_id=document.id)
        invoice = await self._repo.reload(invoice.id)
        logger.info("payment proof uploaded", invoice_id=str(invoice.id), document_id=str(document.id))
        return invoice

    async def review_payment(self, invoice_id: UUID, review: PaymentReview) -> Invoice:
        """Approve (invoice becomes paid) or reject (back to pending) the proof."""
        self._scope.require_editor("review payments")
        invoice = await self.get(invoice_id)
        if invoice.payment_proof_document_id is None:
            raise BusinessRuleError("Invoice has no payment proof to review", rule="NO_PAYMENT_PROOF")

        proof = await DocumentRepository(self._db, self._law_firm_id).get_by_id(
            invoice.payment_proof_document_id
        )
        if proof is not None:
            proof.status = DocumentStatus.APPROVED if review.approved else DocumentStatus.REJECTED
            proof.reviewer_user_id = self._scope.user_id
            proof.reviewed_at = utcnow()

        if review.approved:
            values = {"status": InvoiceStatus.PAID, "paid_date": review.paid_date or date.today()}
        else:
            values = {"status": InvoiceStatus.PENDING, "paid_date": None}

        await self._repo.update(invoice, **values)
        invoice = await self._repo.reload(invoice.id)
        logger.info(
            "payment reviewed",
            invoice_id=str(invoice.id),
            approved=review.approved,
            reviewed_by=str(self._scope.user_id),
        )
        return invoice

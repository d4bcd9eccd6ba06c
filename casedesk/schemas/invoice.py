"""
Invoice schemas.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from pydantic import Field

from casedesk.models.invoice import InvoiceStatus
from casedesk.schemas.base import BaseSchema, IDMixin, TimestampMixin


class LineItemIn(BaseSchema):
    description: str = Field(..., min_length=1, max_length=500)
    hours: Decimal = Field(..., ge=0)
    rate: Decimal = Field(..., ge=0)


class LineItemResponse(BaseSchema, IDMixin):
    description: str
    hours: Decimal
    rate: Decimal
    amount: Decimal
    position: int


class InvoiceCreate(BaseSchema):
    """
    When ``line_items`` are given the amount is their total and any
    explicit ``amount`` is ignored.
    """

    invoice_number: str = Field(..., min_length=1, max_length=50)
    client_id: UUID
    case_id: UUID | None = None
    assigned_to_user_id: UUID | None = None
    description: str | None = None
    amount: Decimal = Field(Decimal("0"), ge=0)
    issue_date: date | None = None
    due_date: date | None = None
    status: InvoiceStatus = InvoiceStatus.PENDING
    line_items: list[LineItemIn] = []


class InvoiceUpdate(BaseSchema):
    """Partial update; ``line_items`` replaces the whole list when present."""

    invoice_number: str | None = Field(None, min_length=1, max_length=50)
    case_id: UUID | None = None
    assigned_to_user_id: UUID | None = None
    description: str | None = None
    amount: Decimal | None = Field(None, ge=0)
    issue_date: date | None = None
    due_date: date | None = None
    paid_date: date | None = None
    status: InvoiceStatus | None = None
    line_items: list[LineItemIn] | None = None


class PaymentReview(BaseSchema):
    approved: bool
    paid_date: date | None = None


class InvoiceResponse(BaseSchema, IDMixin, TimestampMixin):
    law_firm_id: UUID
    invoice_number: str
    client_id: UUID
    case_id: UUID | None = None
    created_by_user_id: UUID | None = None
    assigned_to_user_id: UUID | None = None
    description: str | None = None
    amount: Decimal
    issue_date: date
    due_date: date | None = None
    paid_date: date | None = None
    status: InvoiceStatus
    payment_proof_document_id: UUID | None = None
    is_overdue: bool
    line_items: list[LineItemResponse] = []

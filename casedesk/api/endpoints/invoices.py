"""
Invoice endpoints.
"""

from uuid import UUID

from fastapi import APIRouter, File, Query, UploadFile

from casedesk.core.dependencies import DBSession, Scope, Storage
from casedesk.models.invoice import InvoiceStatus
from casedesk.schemas.base import APIResponse, PaginatedResponse, paginate
from casedesk.schemas.invoice import InvoiceCreate, InvoiceResponse, InvoiceUpdate, PaymentReview
from casedesk.services.invoice_service import InvoiceService

router = APIRouter(prefix="/invoices", tags=["Invoices"])


@router.get("", response_model=PaginatedResponse[InvoiceResponse])
async def list_invoices(
    db: DBSession,
    scope: Scope,
    storage: Storage,
    status: InvoiceStatus | None = None,
    client_id: UUID | None = None,
    case_id: UUID | None = None,
    search: str | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
):
    """Firm invoices for staff; a client account only gets the ones billed to it."""
    invoices, total = await InvoiceService(db, scope, storage).list_invoices(
        status=status,
        client_id=client_id,
        case_id=case_id,
        search=search,
        skip=skip,
        limit=limit,
    )
    return PaginatedResponse(
        **paginate([InvoiceResponse.model_validate(i) for i in invoices], total, skip, limit)
    )


@router.post("", response_model=APIResponse[InvoiceResponse])
async def create_invoice(data: InvoiceCreate, db: DBSession, scope: Scope, storage: Storage):
    invoice = await InvoiceService(db, scope, storage).create(data)
    return APIResponse(
        success=True,
        data=InvoiceResponse.model_validate(invoice),
        message="Invoice created",
    )


@router.get("/{invoice_id}", response_model=APIResponse[InvoiceResponse])
async def get_invoice(invoice_id: UUID, db: DBSession, scope: Scope, storage: Storage):
    invoice = await InvoiceService(db, scope, storage).get(invoice_id)
    return APIResponse(success=True, data=InvoiceResponse.model_validate(invoice))


@router.put("/{invoice_id}", response_model=APIResponse[InvoiceResponse])
async def update_invoice(
    invoice_id: UUID,
    data: InvoiceUpdate,
    db: DBSession,
    scope: Scope,
    storage: Storage,
):
    invoice = await InvoiceService(db, scope, storage).update(invoice_id, data)
    return APIResponse(success=True, data=InvoiceResponse.model_validate(invoice))


@router.delete("/{invoice_id}", response_model=APIResponse[None])
async def delete_invoice(invoice_id: UUID, db: DBSession, scope: Scope, storage: Storage):
    await InvoiceService(db, scope, storage).delete(invoice_id)
    return APIResponse(success=True, message="Invoice deleted")


@router.post("/{invoice_id}/payment-proof", response_model=APIResponse[InvoiceResponse])
async def upload_payment_proof(
    invoice_id: UUID,
    db: DBSession,
    scope: Scope,
    storage: Storage,
    file: UploadFile = File(..., description="Receipt or transfer confirmation"),
):
    content = await file.read()
    invoice = await InvoiceService(db, scope, storage).upload_payment_proof(
        invoice_id,
        content,
        file_name=file.filename or "payment-proof",
        mime_type=file.content_type or "application/octet-stream",
    )
    return APIResponse(
        success=True,
        data=InvoiceResponse.model_validate(invoice),
        message="Payment proof uploaded",
    )


@router.post("/{invoice_id}/review-payment", response_model=APIResponse[InvoiceResponse])
async def review_payment(
    invoice_id: UUID,
    review: PaymentReview,
    db: DBSession,
    scope: Scope,
    storage: Storage,
):
    invoice = await InvoiceService(db, scope, storage).review_payment(invoice_id, review)
    return APIResponse(success=True, data=InvoiceResponse.model_validate(invoice))

"""
Statistics and dashboard schemas.
"""

from decimal import Decimal
from uuid import UUID

from casedesk.schemas.base import BaseSchema
from casedesk.schemas.case import CaseResponse, UpcomingDeadline
from casedesk.schemas.document import DocumentResponse
from casedesk.schemas.event import EventResponse
from casedesk.schemas.invoice import InvoiceResponse
from casedesk.schemas.law_firm import LawFirmResponse


class LawFirmStats(BaseSchema):
    law_firm_id: UUID
    member_count: int
    case_count: int
    storage_used_mb: float
    active_cases: int
    closed_cases: int
    high_priority_cases: int
    associate_count: int
    admin_count: int
    active_clients: int
    paid_invoices: int
    pending_invoices: int
    total_revenue: Decimal


class UserStats(BaseSchema):
    user_id: UUID
    assigned_cases: int
    total_documents: int
    upcoming_events: int
    todays_events: int
    deadlines: int


class ClientStats(BaseSchema):
    client_id: UUID | None
    total_cases: int
    active_cases: int
    completed_cases: int
    total_documents: int
    pending_documents: int
    outstanding_balance: Decimal
    total_billed: Decimal


class StaffDashboard(BaseSchema):
    law_firm: LawFirmResponse
    stats: LawFirmStats
    recent_cases: list[CaseResponse]
    upcoming_deadlines: list[UpcomingDeadline]
    recent_documents: list[DocumentResponse]
    pending_invoices: list[InvoiceResponse]
    todays_events: list[EventResponse]
    upcoming_events: list[EventResponse]

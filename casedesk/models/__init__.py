"""
SQLAlchemy models.

Importing this package registers every table on ``Base.metadata``.
"""

from casedesk.models.case import Case, CaseActivity, CasePriority, CaseStatus
from casedesk.models.client import Client, ClientStatus, ClientType
from casedesk.models.document import Document, DocumentStatus
from casedesk.models.event import Event, EventPriority, EventStatus, EventType
from casedesk.models.invoice import Invoice, InvoiceLineItem, InvoiceStatus
from casedesk.models.law_firm import LawFirm
from casedesk.models.note import Note
from casedesk.models.user import User, UserPermission, UserRole

__all__ = [
    # Tenant and people
    "LawFirm",
    "User",
    "UserRole",
    "UserPermission",
    "Client",
    "ClientType",
    "ClientStatus",
    # Cases
    "Case",
    "CaseActivity",
    "CaseStatus",
    "CasePriority",
    # Documents and notes
    "Document",
    "DocumentStatus",
    "Note",
    # Billing
    "Invoice",
    "InvoiceLineItem",
    "InvoiceStatus",
    # Calendar
    "Event",
    "EventType",
    "EventStatus",
    "EventPriority",
]

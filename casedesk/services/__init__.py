"""
Services layer.

Business rules and access checks for every domain operation.
"""

from casedesk.services.auth_service import AuthService
from casedesk.services.case_service import CaseService
from casedesk.services.client_service import ClientService
from casedesk.services.document_service import DocumentService
from casedesk.services.event_service import EventService
from casedesk.services.invoice_service import InvoiceService
from casedesk.services.law_firm_service import LawFirmService
from casedesk.services.note_service import NoteService
from casedesk.services.stats_service import StatsService
from casedesk.services.user_service import UserService

__all__ = [
    "AuthService",
    "CaseService",
    "ClientService",
    "DocumentService",
    "EventService",
    "InvoiceService",
    "LawFirmService",
    "NoteService",
    "StatsService",
    "UserService",
]

"""Repositories - data access layer."""

from casedesk.repositories.base import BaseRepository, MultiTenantRepository
from casedesk.repositories.case_repository import CaseActivityRepository, CaseRepository
from casedesk.repositories.client_repository import ClientRepository
from casedesk.repositories.document_repository import DocumentRepository
from casedesk.repositories.event_repository import EventRepository
from casedesk.repositories.invoice_repository import InvoiceRepository
from casedesk.repositories.law_firm_repository import LawFirmRepository
from casedesk.repositories.note_repository import CaseNoteReader, NoteRepository
from casedesk.repositories.user_repository import UserRepository

__all__ = [
    # Base
    "BaseRepository",
    "MultiTenantRepository",
    # Entities
    "LawFirmRepository",
    "UserRepository",
    "ClientRepository",
    "CaseRepository",
    "CaseActivityRepository",
    "DocumentRepository",
    "NoteRepository",
    "CaseNoteReader",
    "InvoiceRepository",
    "EventRepository",
]

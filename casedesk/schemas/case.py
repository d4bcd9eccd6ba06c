"""
Case schemas.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import Field

from casedesk.models.case import CasePriority, CaseStatus
from casedesk.schemas.base import BaseSchema, IDMixin, TimestampMixin
from casedesk.schemas.document import DocumentResponse
from casedesk.schemas.note import NoteResponse


class CaseBase(BaseSchema):
    case_number: str = Field(..., min_length=1, max_length=100)
    file_number: str = Field(..., min_length=1, max_length=100)
    title: str = Field(..., min_length=1, max_length=255)
    case_type: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    deadline: date | None = None


class CaseCreate(CaseBase):
    client_id: UUID
    status: CaseStatus = CaseStatus.ACTIVE
    priority: CasePriority = CasePriority.MEDIUM
    assigned_to_user_id: UUID | None = None
    date_opened: date | None = None


class CaseUpdate(BaseSchema):
    """Partial merge: omitted fields keep their stored value."""

    case_number: str | None = Field(None, min_length=1, max_length=100)
    file_number: str | None = Field(None, min_length=1, max_length=100)
    title: str | None = Field(None, min_length=1, max_length=255)
    case_type: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    status: CaseStatus | None = None
    priority: CasePriority | None = None
    client_id: UUID | None = None
    assigned_to_user_id: UUID | None = None
    date_opened: date | None = None
    deadline: date | None = None


class CaseResponse(CaseBase, IDMixin, TimestampMixin):
    law_firm_id: UUID
    client_id: UUID
    status: CaseStatus
    priority: CasePriority
    assigned_to_user_id: UUID | None = None
    added_by_user_id: UUID | None = None
    date_opened: date

    # Derived
    progress: int
    days_left: int | None = None
    deadline_urgency: int | None = None


class CaseActivityResponse(BaseSchema, IDMixin):
    case_id: UUID
    user_id: UUID | None = None
    action: str
    description: str
    created_at: datetime


class CaseDetailResponse(CaseResponse):
    """A case with its documents, visible notes and activity feed."""

    documents: list[DocumentResponse] = []
    notes: list[NoteResponse] = []
    activities: list[CaseActivityResponse] = []


class UpcomingDeadline(BaseSchema):
    case_id: UUID
    case_number: str
    title: str
    deadline: date
    days_left: int
    urgency: int
    priority: CasePriority

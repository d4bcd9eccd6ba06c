"""
Document schemas.

Uploads arrive as multipart form fields, so there is no create schema;
the endpoint reads the form and the service validates it.
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from casedesk.models.document import DocumentStatus
from casedesk.schemas.base import BaseSchema, IDMixin, TimestampMixin


class DocumentUpdate(BaseSchema):
    """Metadata only; the stored file is immutable."""

    name: str | None = Field(None, min_length=1, max_length=255)
    document_type: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    status: DocumentStatus | None = None
    case_id: UUID | None = None


class DocumentResponse(BaseSchema, IDMixin, TimestampMixin):
    law_firm_id: UUID
    case_id: UUID | None = None
    name: str
    document_type: str
    description: str | None = None
    status: DocumentStatus
    version: int

    file_name: str
    file_size: int
    file_type: str
    mime_type: str
    size_label: str
    sha256: str

    uploaded_by_user_id: UUID
    uploaded_at: datetime
    reviewer_user_id: UUID | None = None
    reviewed_at: datetime | None = None

"""
Document model.

Holds metadata only; the payload lives in the storage backend under
``storage_path``.
"""

import enum
import uuid
from datetime import datetime
from pathlib import PurePosixPath

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from casedesk.core.case_metrics import format_file_size
from casedesk.db.base import MultiTenantBase, PgEnum, utcnow


class DocumentStatus(str, enum.Enum):
    DRAFT = "Draft"
    UNDER_REVIEW = "Under Review"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    REFERENCE = "Reference"


REVIEWED_STATUSES = (DocumentStatus.APPROVED, DocumentStatus.REJECTED)
PENDING_STATUSES = (DocumentStatus.DRAFT, DocumentStatus.UNDER_REVIEW)
PAYMENT_PROOF_TYPE = "Payment Proof"


class Document(MultiTenantBase):
    """Metadata for an uploaded file."""

    __tablename__ = "documents"

    case_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("cases.id"),
        index=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    document_type: Mapped[str] = mapped_column(String(100), default="General", nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    status: Mapped[DocumentStatus] = mapped_column(
        PgEnum(DocumentStatus),
        default=DocumentStatus.DRAFT,
        nullable=False,
        index=True,
    )
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    # File
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False)
    mime_type: Mapped[str] = mapped_column(String(150), nullable=False)
    storage_path: Mapped[str] = mapped_column(String(500), nullable=False, unique=True)
    sha256: Mapped[str] = mapped_column(String(64), nullable=False)

    uploaded_by_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    # Review
    reviewer_user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    @property
    def file_type(self) -> str:
        """Lower-case extension without the dot, e.g. ``pdf``."""
        return PurePosixPath(self.file_name).suffix.lstrip(".").lower()

    @property
    def size_label(self) -> str:
        return format_file_size(self.file_size)

    def __repr__(self) -> str:
        return f"<Document(id={self.id}, name='{self.name}', version={self.version})>"

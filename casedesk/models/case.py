"""
Case and case activity models.
"""

import enum
import uuid
from datetime import date

from sqlalchemy import Date, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from casedesk.core.case_metrics import case_progress, days_left, deadline_urgency
from casedesk.db.base import MultiTenantBase, PgEnum


class CaseStatus(str, enum.Enum):
    """Free-form: any status may follow any other."""

    ACTIVE = "Active"
    ON_HOLD = "On Hold"
    CLOSED = "Closed"
    ARCHIVED = "Archived"


class CasePriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


OPEN_CASE_STATUSES = (CaseStatus.ACTIVE, CaseStatus.ON_HOLD)
CLOSED_CASE_STATUSES = (CaseStatus.CLOSED, CaseStatus.ARCHIVED)


class Case(MultiTenantBase):
    """
    A legal matter handled by the firm.

    ``case_number`` is the public reference and ``file_number`` the
    internal one; both are unique within a firm.
    """

    __tablename__ = "cases"
    __table_args__ = (
        UniqueConstraint("law_firm_id", "case_number", name="uq_cases_firm_case_number"),
        UniqueConstraint("law_firm_id", "file_number", name="uq_cases_firm_file_number"),
    )

    case_number: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    file_number: Mapped[str] = mapped_column(String(100), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    case_type: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    status: Mapped[CaseStatus] = mapped_column(
        PgEnum(CaseStatus),
        default=CaseStatus.ACTIVE,
        nullable=False,
        index=True,
    )
    priority: Mapped[CasePriority] = mapped_column(
        PgEnum(CasePriority),
        default=CasePriority.MEDIUM,
        nullable=False,
    )

    client_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("clients.id"),
        nullable=False,
        index=True,
    )
    assigned_to_user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        index=True,
    )
    added_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
    )

    date_opened: Mapped[date] = mapped_column(Date, default=date.today, nullable=False)
    deadline: Mapped[date | None] = mapped_column(Date, index=True)

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_CASE_STATUSES

    @property
    def progress(self) -> int:
        return case_progress(self.status, self.date_opened)

    @property
    def days_left(self) -> int | None:
        return days_left(self.deadline)

    @property
    def deadline_urgency(self) -> int | None:
        return deadline_urgency(self.days_left)

    def __repr__(self) -> str:
        return f"<Case(id={self.id}, case_number='{self.case_number}')>"


class CaseActivity(MultiTenantBase):
    """An entry in a case's activity feed, written on every change."""

    __tablename__ = "case_activities"

    case_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("cases.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
    )

    action: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<CaseActivity(case_id={self.case_id}, action='{self.action}')>"

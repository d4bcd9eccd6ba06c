"""
Calendar event model.
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from casedesk.db.base import MultiTenantBase, PgEnum


class EventType(str, enum.Enum):
    MEETING = "meeting"
    DEADLINE = "deadline"
    HEARING = "hearing"
    COURT_DATE = "court_date"
    FILING = "filing"
    CONSULTATION = "consultation"
    OTHER = "other"


class EventStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    POSTPONED = "postponed"


class EventPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


ACTIVE_EVENT_STATUSES = (EventStatus.SCHEDULED, EventStatus.CONFIRMED)


class Event(MultiTenantBase):
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint("end_time >= start_time", name="ck_events_end_after_start"),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    event_type: Mapped[EventType] = mapped_column(
        PgEnum(EventType),
        default=EventType.MEETING,
        nullable=False,
    )
    status: Mapped[EventStatus] = mapped_column(
        PgEnum(EventStatus),
        default=EventStatus.SCHEDULED,
        nullable=False,
        index=True,
    )
    priority: Mapped[EventPriority] = mapped_column(
        PgEnum(EventPriority),
        default=EventPriority.MEDIUM,
        nullable=False,
    )

    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    all_day: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    location: Mapped[str | None] = mapped_column(String(255))
    meeting_link: Mapped[str | None] = mapped_column(String(500))

    case_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("cases.id", ondelete="CASCADE"),
        index=True,
    )
    assigned_to_user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        index=True,
    )
    created_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
    )

    client_invited: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    client_confirmed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    reminder_minutes_before: Mapped[int | None] = mapped_column(Integer)

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title='{self.title}', start={self.start_time})>"

"""
Calendar event schemas.
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from casedesk.models.event import EventPriority, EventStatus, EventType
from casedesk.schemas.base import BaseSchema, IDMixin, TimestampMixin, as_utc


class EventBase(BaseSchema):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    event_type: EventType = EventType.MEETING
    status: EventStatus = EventStatus.SCHEDULED
    priority: EventPriority = EventPriority.MEDIUM
    start_time: datetime
    end_time: datetime
    all_day: bool = False
    location: str | None = None
    meeting_link: str | None = None
    case_id: UUID | None = None
    assigned_to_user_id: UUID | None = None
    client_invited: bool = False
    reminder_minutes_before: int | None = Field(None, ge=0)


class EventCreate(EventBase):
    @field_validator("start_time", "end_time")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return as_utc(v)

    @model_validator(mode="after")
    def _chronological(self) -> "EventCreate":
        if self.end_time < self.start_time:
            raise ValueError("end_time must not be before start_time")
        return self


class EventUpdate(BaseSchema):
    """Partial update; the time ordering is re-checked against stored values."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    event_type: EventType | None = None
    status: EventStatus | None = None
    priority: EventPriority | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    all_day: bool | None = None
    location: str | None = None
    meeting_link: str | None = None
    case_id: UUID | None = None
    assigned_to_user_id: UUID | None = None
    client_invited: bool | None = None
    reminder_minutes_before: int | None = Field(None, ge=0)

    @field_validator("start_time", "end_time")
    @classmethod
    def _utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)


class EventResponse(EventBase, IDMixin, TimestampMixin):
    law_firm_id: UUID
    created_by_user_id: UUID | None = None
    client_confirmed: bool

    @field_validator("start_time", "end_time")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return as_utc(v)

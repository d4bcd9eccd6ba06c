"""
Law firm schemas.
"""

from datetime import date, datetime

from pydantic import EmailStr, Field

from casedesk.schemas.base import BaseSchema, IDMixin, TimestampMixin


class LawFirmBase(BaseSchema):
    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr | None = None
    phone: str | None = None
    website: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    logo_url: str | None = None
    description: str | None = None


class LawFirmCreate(LawFirmBase):
    pass


class LawFirmUpdate(BaseSchema):
    name: str | None = Field(None, min_length=2, max_length=255)
    email: EmailStr | None = None
    phone: str | None = None
    website: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    logo_url: str | None = None
    description: str | None = None
    is_active: bool | None = None


class LawFirmResponse(LawFirmBase, IDMixin, TimestampMixin):
    is_active: bool
    joined_date: date
    last_active_at: datetime | None = None
    member_count: int = 0
    case_count: int = 0

"""
Client schemas.
"""

from datetime import date
from uuid import UUID

from pydantic import EmailStr, Field

from casedesk.models.client import ClientStatus, ClientType
from casedesk.schemas.base import BaseSchema, IDMixin, TimestampMixin


class ClientBase(BaseSchema):
    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr | None = None
    phone: str | None = None
    company: str | None = None
    address: str | None = None
    client_type: ClientType = ClientType.INDIVIDUAL


class ClientCreate(ClientBase):
    assigned_associate_id: UUID | None = None


class ClientUpdate(BaseSchema):
    name: str | None = Field(None, min_length=2, max_length=255)
    email: EmailStr | None = None
    phone: str | None = None
    company: str | None = None
    address: str | None = None
    client_type: ClientType | None = None
    status: ClientStatus | None = None
    assigned_associate_id: UUID | None = None


class ClientResponse(ClientBase, IDMixin, TimestampMixin):
    law_firm_id: UUID
    status: ClientStatus
    user_account_id: UUID | None = None
    assigned_associate_id: UUID | None = None
    joined_date: date

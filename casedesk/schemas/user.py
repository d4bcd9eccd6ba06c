"""
User and authentication schemas.
"""

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field

from casedesk.models.user import UserPermission, UserRole
from casedesk.schemas.base import BaseSchema, IDMixin, TimestampMixin
from casedesk.schemas.client import ClientResponse


class UserBase(BaseSchema):
    email: EmailStr
    full_name: str = Field(..., min_length=2, max_length=255)
    username: str | None = Field(None, min_length=3, max_length=100)
    phone: str | None = None


class UserCreate(UserBase):
    """
    Registration of a firm member.

    ``permissions`` defaults by role when omitted. ``law_firm_id`` is
    only honoured for platform administrators; everyone else registers
    into their own firm. For client accounts, ``client_id`` links an
    existing client record; otherwise one is created.
    """

    password: str = Field(..., min_length=8)
    role: UserRole = UserRole.ASSOCIATE
    permissions: UserPermission | None = None
    law_firm_id: UUID | None = None
    client_id: UUID | None = None


class UserUpdate(BaseSchema):
    """Partial update. Role, permissions and is_active need a team manager."""

    full_name: str | None = Field(None, min_length=2, max_length=255)
    username: str | None = Field(None, min_length=3, max_length=100)
    phone: str | None = None
    email: EmailStr | None = None
    role: UserRole | None = None
    permissions: UserPermission | None = None
    is_active: bool | None = None


class ProfileUpdate(BaseSchema):
    full_name: str | None = Field(None, min_length=2, max_length=255)
    username: str | None = Field(None, min_length=3, max_length=100)
    phone: str | None = None


class PasswordChange(BaseSchema):
    current_password: str
    new_password: str = Field(..., min_length=8)


class UserResponse(UserBase, IDMixin, TimestampMixin):
    law_firm_id: UUID | None
    role: UserRole
    permissions: UserPermission
    is_active: bool
    last_login_at: datetime | None = None


class CurrentUserResponse(UserResponse):
    """``/auth/me``: the user plus the client record behind a client account."""

    client: ClientResponse | None = None


# === Authentication ===

class LoginRequest(BaseSchema):
    email: EmailStr
    password: str


class LoginResponse(BaseSchema):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class OnboardingRequest(BaseSchema):
    """Creates a firm and its first administrator in one call."""

    law_firm_name: str = Field(..., min_length=2, max_length=255)
    law_firm_email: EmailStr | None = None
    law_firm_phone: str | None = None

    full_name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8)


class OnboardingResponse(BaseSchema):
    law_firm_id: UUID
    user_id: UUID
    access_token: str
    token_type: str = "bearer"

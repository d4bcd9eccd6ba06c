"""
User model.
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from casedesk.db.base import Base, PgEnum


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    ASSOCIATE = "associate"
    CLIENT = "client"


class UserPermission(str, enum.Enum):
    """Firm-internal privilege level, independent of role."""

    FULL_ACCESS = "full access"
    LIMITED_ACCESS = "limited access"
    NO_ACCESS = "no access"


DEFAULT_PERMISSIONS = {
    UserRole.ADMIN: UserPermission.FULL_ACCESS,
    UserRole.ASSOCIATE: UserPermission.LIMITED_ACCESS,
    UserRole.CLIENT: UserPermission.NO_ACCESS,
}


class User(Base):
    """
    A person who can sign in.

    An admin without a law firm is a platform administrator.
    """

    __tablename__ = "users"

    law_firm_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("law_firms.id"),
        index=True,
    )

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    username: Mapped[str | None] = mapped_column(String(100), unique=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50))

    role: Mapped[UserRole] = mapped_column(
        PgEnum(UserRole),
        default=UserRole.ASSOCIATE,
        nullable=False,
    )
    permissions: Mapped[UserPermission] = mapped_column(
        PgEnum(UserPermission),
        default=UserPermission.LIMITED_ACCESS,
        nullable=False,
    )

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    @property
    def is_platform_admin(self) -> bool:
        return self.role == UserRole.ADMIN and self.law_firm_id is None

    @property
    def is_staff(self) -> bool:
        return self.role in (UserRole.ADMIN, UserRole.ASSOCIATE)

    @property
    def is_team_manager(self) -> bool:
        """Admins, and staff granted full access, manage the team."""
        if self.role == UserRole.ADMIN:
            return True
        return self.role == UserRole.ASSOCIATE and self.permissions == UserPermission.FULL_ACCESS

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role={self.role.value})>"

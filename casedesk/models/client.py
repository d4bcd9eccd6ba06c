"""
Client model: the people and businesses a firm represents.
"""

import enum
import uuid
from datetime import date

from sqlalchemy import Date, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from casedesk.db.base import MultiTenantBase, PgEnum


class ClientType(str, enum.Enum):
    INDIVIDUAL = "individual"
    BUSINESS = "business"


class ClientStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Client(MultiTenantBase):
    """
    A firm's client.

    ``user_account_id`` links the client-role user who signs in to the
    client portal; everything that user sees is derived from this row.
    """

    __tablename__ = "clients"
    __table_args__ = (
        UniqueConstraint("law_firm_id", "email", name="uq_clients_firm_email"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255))
    phone: Mapped[str | None] = mapped_column(String(50))
    company: Mapped[str | None] = mapped_column(String(255))
    address: Mapped[str | None] = mapped_column(Text)

    client_type: Mapped[ClientType] = mapped_column(
        PgEnum(ClientType),
        default=ClientType.INDIVIDUAL,
        nullable=False,
    )
    status: Mapped[ClientStatus] = mapped_column(
        PgEnum(ClientStatus),
        default=ClientStatus.ACTIVE,
        nullable=False,
    )

    user_account_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        unique=True,
    )
    assigned_associate_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
    )

    joined_date: Mapped[date] = mapped_column(Date, default=date.today)

    def __repr__(self) -> str:
        return f"<Client(id={self.id}, name='{self.name}')>"

"""
Declarative base shared by every model.

Provides the id/created_at/updated_at columns and the law firm
foreign key for tenant-owned tables.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Type

from sqlalchemy import DateTime, Enum as SQLEnum, ForeignKey, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def PgEnum(enum_class: Type) -> SQLEnum:
    """
    Enum column persisted by member value instead of member name.

    ``CaseStatus.ON_HOLD`` is stored as ``"On Hold"``, matching the
    strings the API exposes.
    """
    return SQLEnum(enum_class, values_callable=lambda x: [e.value for e in x])


class Base(DeclarativeBase):
    """Base for all models: UUID primary key and audit timestamps."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
    )

    @declared_attr.directive
    @classmethod
    def __tablename__(cls) -> str:
        # CamelCase -> snake_case
        name = cls.__name__
        return "".join(
            ["_" + c.lower() if c.isupper() else c for c in name]
        ).lstrip("_")

    def to_dict(self) -> dict[str, Any]:
        return {
            column.name: getattr(self, column.name)
            for column in self.__table__.columns
        }


class MultiTenantBase(Base):
    """Base for rows owned by exactly one law firm."""

    __abstract__ = True

    law_firm_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("law_firms.id"),
        nullable=False,
        index=True,
    )

"""
Law firm model.

The tenant boundary: every other row belongs to exactly one firm.
"""

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from casedesk.db.base import Base


class LawFirm(Base):
    """A law firm (tenant)."""

    __tablename__ = "law_firms"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Contact
    email: Mapped[str | None] = mapped_column(String(255))
    phone: Mapped[str | None] = mapped_column(String(50))
    website: Mapped[str | None] = mapped_column(String(255))

    # Address
    address: Mapped[str | None] = mapped_column(Text)
    city: Mapped[str | None] = mapped_column(String(100))
    country: Mapped[str | None] = mapped_column(String(100))

    logo_url: Mapped[str | None] = mapped_column(String(500))
    description: Mapped[str | None] = mapped_column(Text)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    joined_date: Mapped[date] = mapped_column(Date, default=date.today)
    last_active_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<LawFirm(id={self.id}, name='{self.name}')>"

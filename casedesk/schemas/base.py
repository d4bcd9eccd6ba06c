"""
Shared schema building blocks and response envelopes.
"""

from datetime import datetime, timezone
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


def as_utc(value: datetime | None) -> datetime | None:
    """Naive datetimes are taken as UTC; aware ones are converted to it."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class BaseSchema(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class TimestampMixin(BaseModel):
    created_at: datetime
    updated_at: datetime


class IDMixin(BaseModel):
    id: UUID


class APIResponse(BaseModel, Generic[T]):
    """
    Standard success envelope.

    Example:
        return APIResponse(success=True, data=CaseResponse.model_validate(case))
    """

    success: bool
    data: T | None = None
    message: str | None = None


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorDetail


class PaginatedResponse(BaseModel, Generic[T]):
    success: bool = True
    data: list[T]
    total: int
    page: int
    page_size: int


def paginate(items: list, total: int, skip: int, limit: int) -> dict:
    """Keyword arguments for ``PaginatedResponse`` from skip/limit paging."""
    return {
        "success": True,
        "data": items,
        "total": total,
        "page": skip // limit + 1 if limit > 0 else 1,
        "page_size": limit,
    }


def changes(
    schema: BaseModel,
    clearable: tuple[str, ...] = (),
    exclude: set[str] | None = None,
) -> dict:
    """
    Fields the caller actually sent.

    An explicit ``null`` only survives for fields listed in ``clearable``;
    for everything else it is treated as "keep the stored value".
    """
    data = schema.model_dump(exclude_unset=True, exclude=exclude)
    return {
        key: value
        for key, value in data.items()
        if value is not None or key in clearable
    }

"""Pydantic schemas for request validation and response shaping."""

from casedesk.schemas.base import (
    APIResponse,
    BaseSchema,
    ErrorDetail,
    ErrorResponse,
    IDMixin,
    PaginatedResponse,
    TimestampMixin,
)

__all__ = [
    "APIResponse",
    "BaseSchema",
    "ErrorDetail",
    "ErrorResponse",
    "IDMixin",
    "PaginatedResponse",
    "TimestampMixin",
]

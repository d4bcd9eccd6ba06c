"""
Note schemas.
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from casedesk.models.note import DEFAULT_NOTE_CATEGORY
from casedesk.schemas.base import BaseSchema, IDMixin, TimestampMixin


def normalize_tags(tags: list[str] | None) -> list[str] | None:
    """Strip, drop blanks and de-duplicate while keeping first-seen order."""
    if tags is None:
        return None
    seen: dict[str, None] = {}
    for tag in tags:
        cleaned = tag.strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


class NoteCreate(BaseSchema):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = ""
    category: str = Field(DEFAULT_NOTE_CATEGORY, max_length=100)
    tags: list[str] = []
    case_id: UUID | None = None
    is_pinned: bool = False
    is_archived: bool = False
    is_private: bool = True

    @field_validator("tags")
    @classmethod
    def _tags(cls, v: list[str]) -> list[str]:
        return normalize_tags(v)

    @field_validator("category")
    @classmethod
    def _category(cls, v: str) -> str:
        return v.strip() or DEFAULT_NOTE_CATEGORY


class NoteUpdate(BaseSchema):
    title: str | None = Field(None, min_length=1, max_length=255)
    content: str | None = None
    category: str | None = Field(None, max_length=100)
    tags: list[str] | None = None
    case_id: UUID | None = None
    is_pinned: bool | None = None
    is_archived: bool | None = None
    is_private: bool | None = None

    @field_validator("tags")
    @classmethod
    def _tags(cls, v: list[str] | None) -> list[str] | None:
        return normalize_tags(v)


class NoteResponse(BaseSchema, IDMixin, TimestampMixin):
    user_id: UUID
    law_firm_id: UUID | None = None
    case_id: UUID | None = None
    title: str
    content: str
    category: str
    tags: list[str]
    is_pinned: bool
    is_archived: bool
    is_private: bool
    word_count: int
    character_count: int
    view_count: int
    last_accessed_at: datetime | None = None

"""
Note repository.

Notes are owned by a user rather than a firm, so the scope here is the
owner's id.
"""

from uuid import UUID

from sqlalchemy import ColumnElement, or_
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.models.note import Note
from casedesk.repositories.base import BaseRepository


class NoteRepository(BaseRepository[Note]):
    def __init__(self, db: AsyncSession, owner_id: UUID):
        super().__init__(Note, db)
        self.owner_id = owner_id

    def _scope(self) -> list[ColumnElement[bool]]:
        return [Note.user_id == self.owner_id]

    async def search(
        self,
        case_id: UUID | None = None,
        category: str | None = None,
        is_archived: bool | None = None,
        is_pinned: bool | None = None,
        search: str | None = None,
    ) -> list[Note]:
        """Pinned first, then newest. Tag filtering happens in the service."""
        criteria = []
        if case_id is not None:
            criteria.append(Note.case_id == case_id)
        if category:
            criteria.append(Note.category == category)
        if is_archived is not None:
            criteria.append(Note.is_archived == is_archived)
        if is_pinned is not None:
            criteria.append(Note.is_pinned == is_pinned)
        if search:
            term = f"%{search}%"
            criteria.append(or_(Note.title.ilike(term), Note.content.ilike(term)))

        return await self.find(
            *criteria,
            order_by=(Note.is_pinned.desc(), Note.created_at.desc()),
            limit=None,
        )


class CaseNoteReader(BaseRepository[Note]):
    """Read-only view of the notes attached to a case, across owners."""

    def __init__(self, db: AsyncSession, viewer_id: UUID):
        super().__init__(Note, db)
        self.viewer_id = viewer_id

    def _scope(self) -> list[ColumnElement[bool]]:
        return [or_(Note.is_private.is_(False), Note.user_id == self.viewer_id)]

    async def get_by_case(self, case_id: UUID) -> list[Note]:
        return await self.find(
            Note.case_id == case_id,
            order_by=(Note.is_pinned.desc(), Note.created_at.desc()),
            limit=None,
        )

"""
Notes service.

Notes belong to the user who wrote them; nobody else can list, read or
change them through this service.
"""

from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.core.case_metrics import character_count, word_count
from casedesk.core.exceptions import ResourceNotFoundError
from casedesk.core.permissions import AccessScope
from casedesk.db.base import utcnow
from casedesk.models.note import DEFAULT_NOTE_CATEGORY, Note
from casedesk.repositories.case_repository import CaseRepository
from casedesk.repositories.note_repository import NoteRepository
from casedesk.schemas.base import changes
from casedesk.schemas.note import NoteCreate, NoteUpdate

logger = structlog.get_logger()


def content_counts(content: str) -> dict[str, int]:
    return {
        "word_count": word_count(content),
        "character_count": character_count(content),
    }


class NoteService:
    def __init__(self, db: AsyncSession, scope: AccessScope):
        self._db = db
        self._scope = scope
        self._repo = NoteRepository(db, scope.user_id)

    async def _check_case(self, case_id: UUID | None) -> None:
        if case_id is None:
            return
        if self._scope.law_firm_id is None:
            raise ResourceNotFoundError("Case", case_id)

        case = await CaseRepository(self._db, self._scope.law_firm_id).get_by_id(case_id)
        if case is None or (self._scope.is_client and case.client_id != self._scope.client_id):
            raise ResourceNotFoundError("Case", case_id)

    async def _get_owned(self, note_id: UUID) -> Note:
        note = await self._repo.get_by_id(note_id)
        if note is None:
            raise ResourceNotFoundError("Note", note_id)
        return note

    async def get(self, note_id: UUID) -> Note:
        """Read a note and record the access."""
        note = await self._get_owned(note_id)
        return await self._repo.update(
            note,
            view_count=note.view_count + 1,
            last_accessed_at=utcnow(),
        )

    async def list_notes(
        self,
        case_id: UUID | None = None,
        category: str | None = None,
        tag: str | None = None,
        is_archived: bool | None = None,
        is_pinned: bool | None = None,
        search: str | None = None,
    ) -> list[Note]:
        notes = await self._repo.search(
            case_id=case_id,
            category=category,
            is_archived=is_archived,
            is_pinned=is_pinned,
            search=search,
        )
        if tag:
            wanted = tag.strip().lower()
            notes = [note for note in notes if wanted in (t.lower() for t in note.tags)]
        return notes

    async def create(self, data: NoteCreate) -> Note:
        await self._check_case(data.case_id)

        note = await self._repo.create(
            **data.model_dump(),
            **content_counts(data.content),
            user_id=self._scope.user_id,
            law_firm_id=self._scope.law_firm_id,
        )
        logger.info("note created", note_id=str(note.id), user_id=str(self._scope.user_id))
        return note

    async def update(self, note_id: UUID, data: NoteUpdate) -> Note:
        note = await self._get_owned(note_id)

        values = changes(data, clearable=("case_id",))
        if values.get("case_id") is not None:
            await self._check_case(values["case_id"])
        if "category" in values:
            values["category"] = values["category"].strip() or DEFAULT_NOTE_CATEGORY
        if "content" in values:
            values.update(content_counts(values["content"]))

        note = await self._repo.update(note, **values)
        logger.info("note updated", note_id=str(note.id), fields=list(values))
        return note

    async def toggle_pin(self, note_id: UUID) -> Note:
        note = await self._get_owned(note_id)
        return await self._repo.update(note, is_pinned=not note.is_pinned)

    async def toggle_archive(self, note_id: UUID) -> Note:
        note = await self._get_owned(note_id)
        return await self._repo.update(note, is_archived=not note.is_archived)

    async def delete(self, note_id: UUID) -> None:
        note = await self._get_owned(note_id)
        await self._repo.delete(note)
        logger.info("note deleted", note_id=str(note_id))

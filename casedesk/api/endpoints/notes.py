"""
Note endpoints. Every route only ever touches the caller's own notes.
"""

from uuid import UUID

from fastapi import APIRouter

from casedesk.core.dependencies import DBSession, Scope
from casedesk.schemas.base import APIResponse
from casedesk.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from casedesk.services.note_service import NoteService

router = APIRouter(prefix="/notes", tags=["Notes"])


@router.get("", response_model=APIResponse[list[NoteResponse]])
async def list_notes(
    db: DBSession,
    scope: Scope,
    case_id: UUID | None = None,
    category: str | None = None,
    tag: str | None = None,
    is_archived: bool | None = None,
    is_pinned: bool | None = None,
    search: str | None = None,
):
    """Pinned notes first, then newest."""
    notes = await NoteService(db, scope).list_notes(
        case_id=case_id,
        category=category,
        tag=tag,
        is_archived=is_archived,
        is_pinned=is_pinned,
        search=search,
    )
    return APIResponse(success=True, data=[NoteResponse.model_validate(n) for n in notes])


@router.post("", response_model=APIResponse[NoteResponse])
async def create_note(data: NoteCreate, db: DBSession, scope: Scope):
    note = await NoteService(db, scope).create(data)
    return APIResponse(success=True, data=NoteResponse.model_validate(note), message="Note created")


@router.get("/{note_id}", response_model=APIResponse[NoteResponse])
async def get_note(note_id: UUID, db: DBSession, scope: Scope):
    note = await NoteService(db, scope).get(note_id)
    return APIResponse(success=True, data=NoteResponse.model_validate(note))


@router.put("/{note_id}", response_model=APIResponse[NoteResponse])
async def update_note(note_id: UUID, data: NoteUpdate, db: DBSession, scope: Scope):
    note = await NoteService(db, scope).update(note_id, data)
    return APIResponse(success=True, data=NoteResponse.model_validate(note))


@router.post("/{note_id}/toggle-pin", response_model=APIResponse[NoteResponse])
async def toggle_pin(note_id: UUID, db: DBSession, scope: Scope):
    note = await NoteService(db, scope).toggle_pin(note_id)
    return APIResponse(success=True, data=NoteResponse.model_validate(note))


@router.post("/{note_id}/toggle-archive", response_model=APIResponse[NoteResponse])
async def toggle_archive(note_id: UUID, db: DBSession, scope: Scope):
    note = await NoteService(db, scope).toggle_archive(note_id)
    return APIResponse(success=True, data=NoteResponse.model_validate(note))


@router.delete("/{note_id}", response_model=APIResponse[None])
async def delete_note(note_id: UUID, db: DBSession, scope: Scope):
    await NoteService(db, scope).delete(note_id)
    return APIResponse(success=True, message="Note deleted")

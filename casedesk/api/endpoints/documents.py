"""
Document endpoints.

Uploads are multipart/form-data; downloads return the raw bytes.
"""

from urllib.parse import quote
from uuid import UUID

from fastapi import APIRouter, File, Form, Query, Response, UploadFile

from casedesk.core.dependencies import DBSession, Scope, Storage
from casedesk.models.document import DocumentStatus
from casedesk.schemas.base import APIResponse, PaginatedResponse, paginate
from casedesk.schemas.document import DocumentResponse, DocumentUpdate
from casedesk.services.document_service import DocumentService

router = APIRouter(prefix="/documents", tags=["Documents"])


def content_disposition(file_name: str) -> str:
    """``attachment`` header with an ASCII fallback plus the RFC 5987 form."""
    fallback = file_name.encode("ascii", "replace").decode("ascii").replace('"', "'")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(file_name)}"


@router.get("", response_model=PaginatedResponse[DocumentResponse])
async def list_documents(
    db: DBSession,
    scope: Scope,
    storage: Storage,
    case_id: UUID | None = None,
    status: DocumentStatus | None = None,
    document_type: str | None = None,
    uploaded_by: UUID | None = None,
    search: str | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
):
    documents, total = await DocumentService(db, scope, storage).list_documents(
        case_id=case_id,
        status=status,
        document_type=document_type,
        uploaded_by_user_id=uploaded_by,
        search=search,
        skip=skip,
        limit=limit,
    )
    return PaginatedResponse(
        **paginate([DocumentResponse.model_validate(d) for d in documents], total, skip, limit)
    )


@router.post("", response_model=APIResponse[DocumentResponse])
async def upload_document(
    db: DBSession,
    scope: Scope,
    storage: Storage,
    file: UploadFile = File(..., description="Document file"),
    name: str | None = Form(None),
    case_id: UUID | None = Form(None),
    document_type: str | None = Form(None),
    status: DocumentStatus | None = Form(None),
    version: int | None = Form(None, ge=1),
    description: str | None = Form(None),
):
    """Upload a file; size and type limits are checked before anything is stored."""
    content = await file.read()
    document = await DocumentService(db, scope, storage).upload(
        content,
        file_name=file.filename or "document",
        mime_type=file.content_type or "application/octet-stream",
        name=name,
        case_id=case_id,
        document_type=document_type,
        status=status,
        version=version,
        description=description,
    )
    return APIResponse(
        success=True,
        data=DocumentResponse.model_validate(document),
        message="Document uploaded",
    )


@router.get("/{document_id}", response_model=APIResponse[DocumentResponse])
async def get_document(document_id: UUID, db: DBSession, scope: Scope, storage: Storage):
    document = await DocumentService(db, scope, storage).get(document_id)
    return APIResponse(success=True, data=DocumentResponse.model_validate(document))


@router.put("/{document_id}", response_model=APIResponse[DocumentResponse])
async def update_document(
    document_id: UUID,
    data: DocumentUpdate,
    db: DBSession,
    scope: Scope,
    storage: Storage,
):
    document = await DocumentService(db, scope, storage).update(document_id, data)
    return APIResponse(success=True, data=DocumentResponse.model_validate(document))


@router.get("/{document_id}/download")
async def download_document(document_id: UUID, db: DBSession, scope: Scope, storage: Storage):
    document, content = await DocumentService(db, scope, storage).download(document_id)
    return Response(
        content=content,
        media_type=document.mime_type,
        headers={"Content-Disposition": content_disposition(document.file_name)},
    )


@router.delete("/{document_id}", response_model=APIResponse[None])
async def delete_document(document_id: UUID, db: DBSession, scope: Scope, storage: Storage):
    await DocumentService(db, scope, storage).delete(document_id)
    return APIResponse(success=True, message="Document deleted")

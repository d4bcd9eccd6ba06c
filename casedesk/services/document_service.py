"""
Document service.

Upload, metadata, download and deletion of case documents. Payloads go
through ``StorageService``; the database keeps the metadata, the storage
path and a SHA-256 of the bytes.
"""

from uuid import UUID

import structlog
from sqlalchemy import ColumnElement
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.core.config import settings
from casedesk.core.exceptions import InsufficientPermissionsError, ResourceNotFoundError
from casedesk.core.permissions import AccessScope
from casedesk.core.storage import StorageService
from casedesk.db.base import utcnow
from casedesk.models.document import REVIEWED_STATUSES, Document, DocumentStatus
from casedesk.repositories.case_repository import CaseRepository
from casedesk.repositories.document_repository import DocumentRepository
from casedesk.schemas.base import changes
from casedesk.schemas.document import DocumentUpdate

logger = structlog.get_logger()


class DocumentService:
    def __init__(self, db: AsyncSession, scope: AccessScope, storage: StorageService):
        self._db = db
        self._scope = scope
        self._storage = storage
        self._law_firm_id = scope.require_law_firm()
        self._repo = DocumentRepository(db, self._law_firm_id)
        self._case_repo = CaseRepository(db, self._law_firm_id)

    def visibility(self) -> list[ColumnElement[bool]]:
        """Extra criteria for client accounts; staff see the whole firm."""
        if not self._scope.is_client:
            return []
        if self._scope.client_id is None:
            return [Document.uploaded_by_user_id == self._scope.user_id]
        return [
            DocumentRepository.visible_to_client(
                self._case_repo.client_case_ids(self._scope.client_id),
                self._scope.user_id,
            )
        ]

    async def _check_case(self, case_id: UUID | None) -> None:
        if case_id is None:
            return
        case = await self._case_repo.get_by_id(case_id)
        if case is None or (self._scope.is_client and case.client_id != self._scope.client_id):
            raise ResourceNotFoundError("Case", case_id)

    async def get(self, document_id: UUID) -> Document:
        documents = await self._repo.find(Document.id == document_id, *self.visibility(), limit=1)
        if not documents:
            raise ResourceNotFoundError("Document", document_id)
        return documents[0]

    async def list_documents(
        self,
        case_id: UUID | None = None,
        status: DocumentStatus | None = None,
        document_type: str | None = None,
        uploaded_by_user_id: UUID | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[list[Document], int]:
        return await self._repo.search(
            *self.visibility(),
            case_id=case_id,
            status=status,
            document_type=document_type,
            uploaded_by_user_id=uploaded_by_user_id,
            search=search,
            skip=skip,
            limit=limit,
        )

    async def upload(
        self,
        content: bytes,
        file_name: str,
        mime_type: str,
        name: str | None = None,
        case_id: UUID | None = None,
        document_type: str | None = None,
        status: DocumentStatus | None = None,
        version: int | None = None,
        description: str | None = None,
        max_size_mb: int | None = None,
        prefix: str = "documents",
    ) -> Document:
        """
        Store a file and record its metadata.

        Staff need edit rights; client accounts may upload into their own
        cases (or without a case).
        """
        if not self._scope.is_client:
            self._scope.require_editor("upload documents")
        await self._check_case(case_id)

        stored = await self._storage.upload_file(
            content,
            original_filename=file_name,
            mime_type=mime_type,
            owner_id=self._law_firm_id,
            prefix=prefix,
            max_size_mb=max_size_mb or settings.MAX_DOCUMENT_SIZE_MB,
        )

        try:
            document = await self._repo.create(
                case_id=case_id,
                name=name or file_name,
                document_type=document_type or "General",
                description=description,
                status=status or DocumentStatus.DRAFT,
                version=version or 1,
                file_name=file_name,
                file_size=stored["size_bytes"],
                mime_type=mime_type,
                storage_path=stored["storage_path"],
                sha256=stored["sha256"],
                uploaded_by_user_id=self._scope.user_id,
                uploaded_at=utcnow(),
            )
        except Exception:
            # No row points at the payload, so it would never be cleaned up
            logger.warning("document insert failed, removing stored file", path=stored["storage_path"])
            await self._storage.delete_file(stored["storage_path"])
            raise

        logger.info(
            "document uploaded",
            document_id=str(document.id),
            case_id=str(case_id) if case_id else None,
            size_bytes=document.file_size,
        )
        return document

    async def update(self, document_id: UUID, data: DocumentUpdate) -> Document:
        """
        Edit metadata. Moving a document to Approved or Rejected records
        the caller as reviewer.
        """
        self._scope.require_editor("update documents")
        document = await self.get(document_id)

        values = changes(data, clearable=("description", "case_id"))
        if values.get("case_id") is not None:
            await self._check_case(values["case_id"])

        new_status = values.get("status")
        if new_status in REVIEWED_STATUSES and new_status != document.status:
            values["reviewer_user_id"] = self._scope.user_id
            values["reviewed_at"] = utcnow()

        document = await self._repo.update(document, **values)
        logger.info("document updated", document_id=str(document.id), fields=list(values))
        return document

    async def download(self, document_id: UUID) -> tuple[Document, bytes]:
        document = await self.get(document_id)
        content = await self._storage.download_file(document.storage_path)
        return document, content

    async def delete(self, document_id: UUID) -> None:
        """Uploader, or a team manager."""
        document = await self.get(document_id)
        if document.uploaded_by_user_id != self._scope.user_id and not self._scope.is_team_manager:
            raise InsufficientPermissionsError("delete this document")

        path = document.storage_path
        await self._repo.delete_document(document)
        await self._storage.delete_file(path)
        logger.info("document deleted", document_id=str(document_id), deleted_by=str(self._scope.user_id))

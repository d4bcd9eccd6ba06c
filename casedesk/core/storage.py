"""
Document storage.

``StorageService`` validates uploads, derives a unique object path and
hashes the content; the bytes themselves go to a backend: the local
filesystem (default) or a Google Cloud Storage bucket.
"""

import hashlib
import uuid
from pathlib import Path
from typing import BinaryIO, Protocol

import structlog
from google.cloud import storage
from google.cloud.exceptions import GoogleCloudError, NotFound

from casedesk.core.config import settings
from casedesk.core.exceptions import (
    FileTooLargeError,
    FileUploadError,
    InvalidFileTypeError,
    StorageError,
    StoredFileMissingError,
)

logger = structlog.get_logger()

MB = 1024 * 1024


class StorageBackend(Protocol):
    def put(self, path: str, content: bytes, mime_type: str) -> None: ...

    def get(self, path: str) -> bytes: ...

    def delete(self, path: str) -> None: ...


class LocalStorageBackend:
    """Stores objects as files below ``root``."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if self.root.resolve() not in target.parents:
            raise StorageError("Invalid storage path", operation="resolve")
        return target

    def put(self, path: str, content: bytes, mime_type: str) -> None:
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            target.write_bytes(content)
        except OSError as e:
            raise FileUploadError(f"Could not write file: {e}")

    def get(self, path: str) -> bytes:
        target = self._resolve(path)
        if not target.is_file():
            raise StoredFileMissingError(path)
        return target.read_bytes()

    def delete(self, path: str) -> None:
        self._resolve(path).unlink(missing_ok=True)


class GCSStorageBackend:
    """Stores objects in a Google Cloud Storage bucket."""

    def __init__(self, bucket_name: str, project_id: str | None = None):
        self.bucket_name = bucket_name
        self.project_id = project_id
        self._client: storage.Client | None = None
        self._bucket: storage.Bucket | None = None

    @property
    def bucket(self) -> storage.Bucket:
        if self._bucket is None:
            self._client = storage.Client(project=self.project_id or None)
            self._bucket = self._client.bucket(self.bucket_name)
        return self._bucket

    def put(self, path: str, content: bytes, mime_type: str) -> None:
        try:
            self.bucket.blob(path).upload_from_string(content, content_type=mime_type)
        except GoogleCloudError as e:
            logger.error("GCS upload failed", error=str(e), path=path)
            raise FileUploadError(f"Could not upload file: {e}")

    def get(self, path: str) -> bytes:
        try:
            return self.bucket.blob(path).download_as_bytes()
        except NotFound:
            raise StoredFileMissingError(path)
        except GoogleCloudError as e:
            logger.error("GCS download failed", error=str(e), path=path)
            raise StorageError(f"Could not download file: {e}", operation="download")

    def delete(self, path: str) -> None:
        try:
            self.bucket.blob(path).delete()
        except NotFound:
            return
        except GoogleCloudError as e:
            logger.error("GCS delete failed", error=str(e), path=path)
            raise StorageError(f"Could not delete file: {e}", operation="delete")


class StorageService:
    """
    Upload, download and delete document payloads.

    Usage:
        service = StorageService(LocalStorageBackend("./storage"))
        stored = await service.upload_file(content, "brief.pdf", "application/pdf", firm_id)
    """

    def __init__(
        self,
        backend: StorageBackend,
        allowed_types: list[str] | None = None,
    ):
        self.backend = backend
        self.allowed_types = allowed_types or settings.ALLOWED_DOCUMENT_TYPES

    def validate_file(self, file_size: int, mime_type: str, max_size_mb: int) -> None:
        if file_size > max_size_mb * MB:
            raise FileTooLargeError(
                max_size_mb=max_size_mb,
                actual_size_mb=file_size / MB,
            )
        if mime_type not in self.allowed_types:
            raise InvalidFileTypeError(mime_type=mime_type, allowed_types=self.allowed_types)

    @staticmethod
    def calculate_hash(content: bytes) -> str:
        return hashlib.sha256(content).hexdigest()

    @staticmethod
    def generate_path(owner_id: uuid.UUID | str, prefix: str, original_filename: str) -> str:
        """``{owner}/{prefix}/{uuid8}_{filename}`` with any client directories stripped."""
        file_uuid = str(uuid.uuid4())[:8]
        safe_filename = Path(original_filename.replace("\\", "/")).name or "file"
        return f"{owner_id}/{prefix}/{file_uuid}_{safe_filename}"

    async def upload_file(
        self,
        file_content: bytes | BinaryIO,
        original_filename: str,
        mime_type: str,
        owner_id: uuid.UUID | str,
        prefix: str = "documents",
        max_size_mb: int | None = None,
    ) -> dict:
        """
        Validate and store a payload.

        Returns:
            Dict with storage_path, sha256 and size_bytes
        """
        if hasattr(file_content, "read"):
            content = file_content.read()
        else:
            content = file_content

        self.validate_file(len(content), mime_type, max_size_mb or settings.MAX_DOCUMENT_SIZE_MB)

        path = self.generate_path(owner_id, prefix, original_filename)
        digest = self.calculate_hash(content)
        self.backend.put(path, content, mime_type)

        logger.info(
            "file stored",
            path=path,
            size_bytes=len(content),
            mime_type=mime_type,
        )
        return {
            "storage_path": path,
            "sha256": digest,
            "size_bytes": len(content),
        }

    async def download_file(self, path: str) -> bytes:
        return self.backend.get(path)

    async def delete_file(self, path: str) -> None:
        self.backend.delete(path)
        logger.info("file removed", path=path)


def build_storage_service() -> StorageService:
    if settings.STORAGE_BACKEND == "gcs":
        backend: StorageBackend = GCSStorageBackend(
            settings.GCS_BUCKET_DOCUMENTS,
            settings.GCP_PROJECT_ID,
        )
    else:
        backend = LocalStorageBackend(settings.LOCAL_STORAGE_PATH)
    return StorageService(backend)

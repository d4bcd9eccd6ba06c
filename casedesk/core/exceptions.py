"""
Application exception hierarchy.

Services raise these; ``casedesk.core.middleware`` maps them to HTTP
responses so endpoints never build error payloads by hand.
"""

from typing import Any
from uuid import UUID


class CaseDeskError(Exception):
    """Base error for the whole application."""

    def __init__(
        self,
        message: str,
        code: str = "CASEDESK_ERROR",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


# === Authentication ===

class AuthenticationError(CaseDeskError):
    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, code="AUTH_ERROR")


class InvalidTokenError(AuthenticationError):
    """Token missing, malformed, expired or pointing at a disabled account."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)
        self.code = "INVALID_TOKEN"


# === Authorization ===

class AuthorizationError(CaseDeskError):
    def __init__(self, message: str = "Access denied"):
        super().__init__(message, code="AUTHORIZATION_ERROR")


class InsufficientPermissionsError(AuthorizationError):
    """The caller's role or permission level does not allow the action."""

    def __init__(self, action: str):
        super().__init__(f"Insufficient permissions to {action}")
        self.code = "INSUFFICIENT_PERMISSIONS"
        self.action = action


class LawFirmRequiredError(AuthorizationError):
    def __init__(self):
        super().__init__("This action requires a law firm membership")
        self.code = "LAW_FIRM_REQUIRED"


# === Resources ===

class ResourceNotFoundError(CaseDeskError):
    def __init__(
        self,
        resource_type: str,
        resource_id: UUID | str | None = None,
    ):
        message = f"{resource_type} not found"
        if resource_id:
            message = f"{resource_type} with ID {resource_id} not found"
        super().__init__(message, code="NOT_FOUND")
        self.resource_type = resource_type
        self.resource_id = resource_id


class ResourceAlreadyExistsError(CaseDeskError):
    """
    A unique value is taken.

    ``field`` is None when the clash was only caught by a database
    constraint, e.g. two concurrent creates of the same record.
    """

    def __init__(
        self,
        resource_type: str,
        field: str | None = None,
        value: str | None = None,
    ):
        message = f"{resource_type} already exists"
        if field:
            message = f"{resource_type} with {field}='{value}' already exists"
        super().__init__(message, code="ALREADY_EXISTS")
        self.resource_type = resource_type
        self.field = field
        self.value = value


# === Validation and business rules ===

class ValidationError(CaseDeskError):
    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field
        self.errors = errors or []


class BusinessRuleError(CaseDeskError):
    def __init__(self, message: str, rule: str | None = None):
        super().__init__(message, code="BUSINESS_RULE_VIOLATION")
        self.rule = rule


class SelfDeletionError(BusinessRuleError):
    def __init__(self):
        super().__init__("You cannot delete your own account", rule="SELF_DELETION")
        self.code = "SELF_DELETION"


# === Storage ===

class StorageError(CaseDeskError):
    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message, code="STORAGE_ERROR")
        self.operation = operation


class FileUploadError(StorageError):
    def __init__(self, message: str = "File upload failed"):
        super().__init__(message, operation="upload")
        self.code = "FILE_UPLOAD_ERROR"


class FileTooLargeError(StorageError):
    """Upload above the configured ceiling for its surface."""

    def __init__(self, max_size_mb: int, actual_size_mb: float):
        super().__init__(
            f"File size must be under {max_size_mb}MB",
            operation="upload",
        )
        self.code = "FILE_TOO_LARGE"
        self.details = {"max_size_mb": max_size_mb, "actual_size_mb": round(actual_size_mb, 2)}


class InvalidFileTypeError(StorageError):
    def __init__(self, mime_type: str, allowed_types: list[str]):
        super().__init__(
            f"File type not allowed: {mime_type}",
            operation="upload",
        )
        self.code = "INVALID_FILE_TYPE"
        self.details = {"allowed_types": allowed_types}


class StoredFileMissingError(StorageError):
    def __init__(self, path: str):
        super().__init__("Stored file could not be found", operation="download")
        self.code = "STORED_FILE_MISSING"
        self.details = {"path": path}

"""Custom exception hierarchy for tgvault."""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Not-found errors (also used for ownership mismatches)
    FOLDER_NOT_FOUND = "FOLDER_NOT_FOUND"
    ITEM_NOT_FOUND = "ITEM_NOT_FOUND"
    NOTE_NOT_FOUND = "NOTE_NOT_FOUND"
    ATTACHMENT_NOT_FOUND = "ATTACHMENT_NOT_FOUND"
    ATTRIBUTE_NOT_FOUND = "ATTRIBUTE_NOT_FOUND"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    DUPLICATE_NAME = "DUPLICATE_NAME"
    NO_FIELDS_SUPPLIED = "NO_FIELDS_SUPPLIED"
    PARTIAL_INPUT = "PARTIAL_INPUT"

    # Owner resolution
    UNAUTHORIZED = "UNAUTHORIZED"

    # Storage errors
    DATABASE_ERROR = "DATABASE_ERROR"
    CONSISTENCY_ERROR = "CONSISTENCY_ERROR"

    # Generic errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class TgVaultException(Exception):
    """
    Base exception for all tgvault errors.

    Provides structured error responses with:
    - Human-readable message
    - Machine-readable error code
    - HTTP status code
    - Optional additional details
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            status_code: HTTP status code to return
            details: Optional additional context/details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for JSON response.

        Returns:
            Dictionary with error, message, and details fields
        """
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class FolderNotFoundError(TgVaultException):
    """Folder not found, or owned by someone else."""

    def __init__(self, folder_id: Any):
        super().__init__(
            f"Folder not found: {folder_id}",
            ErrorCode.FOLDER_NOT_FOUND,
            status_code=404,
            details={"folder_id": folder_id}
        )


class CollectionItemNotFoundError(TgVaultException):
    """Collection item not found in the owner's namespace."""

    def __init__(self, name: str):
        super().__init__(
            f"Collection item not found: {name}",
            ErrorCode.ITEM_NOT_FOUND,
            status_code=404,
            details={"name": name}
        )


class NoteNotFoundError(TgVaultException):
    """Note not found, soft-deleted, or owned by someone else."""

    def __init__(self, note_id: str):
        super().__init__(
            f"Note not found: {note_id}",
            ErrorCode.NOTE_NOT_FOUND,
            status_code=404,
            details={"note_id": note_id}
        )


class AttachmentNotFoundError(TgVaultException):
    """Attachment not found, or its note belongs to someone else."""

    def __init__(self, blob_id: str):
        super().__init__(
            f"Attachment not found: {blob_id}",
            ErrorCode.ATTACHMENT_NOT_FOUND,
            status_code=404,
            details={"blob_id": blob_id}
        )


class AttributeNotFoundError(TgVaultException):
    """Note attribute not found."""

    def __init__(self, attribute_id: int):
        super().__init__(
            f"Attribute not found: {attribute_id}",
            ErrorCode.ATTRIBUTE_NOT_FOUND,
            status_code=404,
            details={"attribute_id": attribute_id}
        )


class ValidationError(TgVaultException):
    """Validation failed for user input."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message,
            ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=details
        )


class DuplicateNameError(ValidationError):
    """A sibling in the same scope already uses this name."""

    def __init__(self, name: str, parent_id: Any = None):
        super().__init__(f"An entry named '{name}' already exists here", field="name")
        self.error_code = ErrorCode.DUPLICATE_NAME
        self.details["parent_id"] = parent_id


class NoFieldsSuppliedError(ValidationError):
    """A partial update carried no fields to change."""

    def __init__(self, fields: tuple):
        super().__init__(f"Nothing to update: supply at least one of {', '.join(fields)}")
        self.error_code = ErrorCode.NO_FIELDS_SUPPLIED
        self.details["accepted_fields"] = list(fields)


class PartialInputError(TgVaultException):
    """Upload is malformed or missing; rejected before touching storage."""

    def __init__(self, message: str):
        super().__init__(
            message,
            ErrorCode.PARTIAL_INPUT,
            status_code=400,
        )


class AuthenticationError(TgVaultException):
    """Request carries no usable owner identity."""

    def __init__(self, message: str = "Invalid or missing owner token"):
        super().__init__(
            message,
            ErrorCode.UNAUTHORIZED,
            status_code=401,
        )


class ConsistencyError(TgVaultException):
    """Stored data violates a structural invariant (e.g. a parent cycle)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message,
            ErrorCode.CONSISTENCY_ERROR,
            status_code=500,
            details=details
        )


class DatabaseError(TgVaultException):
    """Database operation failed."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        details = {}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            message,
            ErrorCode.DATABASE_ERROR,
            status_code=500,
            details=details
        )

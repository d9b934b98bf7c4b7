"""Infrastructure exceptions for storage and external operations.

Storage errors extend TransientStorageException so presentation can map them
to HTTP responses consistently.
"""

from udhyogunity.domain.exceptions import TransientStorageException, UdhyogException


class StorageError(TransientStorageException):
    """Base exception for document store operations."""


class TransientStorageError(StorageError):
    """Transport failure, permission error, missing index or unexpected HTTP status."""

    def __init__(self, message: str, path: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message, path)
        if status_code is not None:
            self.details["status_code"] = status_code


class DocumentNotFoundError(StorageError):
    """Update targeted a document that does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"No document to update: {path}", path)
        self.error_code = "DOCUMENT_NOT_FOUND"


class DocumentExistsError(StorageError):
    """Create targeted a document ID that already exists."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Document already exists: {path}", path)
        self.error_code = "DOCUMENT_EXISTS"


class UploadException(UdhyogException):
    """Media upload to the asset host failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        details = {"status_code": status_code} if status_code is not None else {}
        super().__init__(message, "UPLOAD_ERROR", details)

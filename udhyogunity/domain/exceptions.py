"""Domain exceptions for the UdhyogUnity ratings service.

Review-mutation entry points raise these; statistics entry points catch
everything and return zeroed results instead. The presentation layer maps
error_code to HTTP status in app exception handlers.
"""

from typing import Any


class UdhyogException(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(UdhyogException):
    """Raised when input validation fails (out-of-range rating, blank required field)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class NotFoundException(UdhyogException):
    """Raised when a business, product, service or review resolves to no storage location."""

    def __init__(self, resource_type: str, resource_id: str, message: str | None = None) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'product', 'review').
            resource_id: The identifier that was not found.
            message: Optional override for the default message.
        """
        super().__init__(
            message or f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class TransientStorageException(UdhyogException):
    """Raised when a single read or write against the document store fails.

    Swallowed (logged, counted as zero) on aggregation reads; propagated on
    review writes.
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        details = {"path": path} if path else {}
        super().__init__(message, "STORAGE_ERROR", details)


class PaymentVerificationException(UdhyogException):
    """Raised when a payment settlement callback fails signature verification."""

    def __init__(self, message: str = "Payment signature verification failed") -> None:
        super().__init__(message, "PAYMENT_VERIFICATION_ERROR")


ResourceNotFoundException = NotFoundException

"""Tests for domain and infrastructure exceptions (error_code, message, details)."""

from udhyogunity.domain.exceptions import (
    NotFoundException,
    PaymentVerificationException,
    TransientStorageException,
    UdhyogException,
    ValidationException,
)
from udhyogunity.infrastructure.exceptions import (
    DocumentExistsError,
    DocumentNotFoundError,
    TransientStorageError,
    UploadException,
)


def test_base_exception_default_error_code() -> None:
    """Base UdhyogException uses class name as error_code when not provided."""
    exc = UdhyogException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "UdhyogException"
    assert exc.details == {}


def test_base_exception_to_dict() -> None:
    exc = UdhyogException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {"error": "CUSTOM", "message": "Oops", "details": {"key": "value"}}


def test_validation_exception() -> None:
    exc = ValidationException("Rating must be between 1 and 5", field="rating")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "rating"}
    assert ValidationException("Invalid").details == {}


def test_not_found_exception() -> None:
    exc = NotFoundException("product", "p1")
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.message == "product not found: p1"
    assert exc.details == {"resource_type": "product", "resource_id": "p1"}
    assert NotFoundException("review", "r1", message="Gone").message == "Gone"


def test_storage_exceptions_share_transient_base() -> None:
    """Infrastructure storage errors are caught wherever TransientStorageException is."""
    exc = TransientStorageError("HTTP 503", path="Businesses/x", status_code=503)
    assert isinstance(exc, TransientStorageException)
    assert exc.error_code == "STORAGE_ERROR"
    assert exc.details == {"path": "Businesses/x", "status_code": 503}
    assert DocumentNotFoundError("Businesses/x").error_code == "DOCUMENT_NOT_FOUND"
    assert DocumentExistsError("Businesses/x").error_code == "DOCUMENT_EXISTS"


def test_payment_and_upload_exceptions() -> None:
    assert PaymentVerificationException().error_code == "PAYMENT_VERIFICATION_ERROR"
    exc = UploadException("Cloudinary upload failed", status_code=400)
    assert exc.error_code == "UPLOAD_ERROR"
    assert exc.details == {"status_code": 400}

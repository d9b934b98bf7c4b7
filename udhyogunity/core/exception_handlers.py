"""Error responses for the ratings API.

Every error body has the shape {"error": <code>, "message": <text>} with an
optional "details" object. Domain codes map to HTTP statuses below; unknown
codes are client errors.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from udhyogunity.core.config import get_settings
from udhyogunity.domain.exceptions import UdhyogException

logger = logging.getLogger(__name__)

STATUS_BY_ERROR_CODE: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "PAYMENT_VERIFICATION_ERROR": 400,
    "RESOURCE_NOT_FOUND": 404,
    "DOCUMENT_NOT_FOUND": 404,
    "DOCUMENT_EXISTS": 409,
    "UPLOAD_ERROR": 502,
    "STORAGE_ERROR": 503,
}


def status_for(error_code: str) -> int:
    return STATUS_BY_ERROR_CODE.get(error_code, 400)


def _error_body(code: str, message: Any, details: Any = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error": code, "message": message}
    if details is not None:
        body["details"] = details
    return body


async def handle_domain_error(request: Request, exc: UdhyogException) -> JSONResponse:
    status = status_for(exc.error_code)
    # Upstream and storage failures are ours to look at; 4xx are the caller's.
    if status >= 500:
        logger.error(
            "%s %s failed with %s: %s", request.method, request.url.path, exc.error_code, exc.message
        )
    else:
        logger.debug("%s %s rejected: %s", request.method, request.url.path, exc.error_code)
    return JSONResponse(status_code=status, content=exc.to_dict())


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and params (wrong types, unknown review type) stay 422."""
    return JSONResponse(
        status_code=422,
        content=_error_body("VALIDATION_ERROR", "Request validation failed", exc.errors()),
    )


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body("HTTP_ERROR", exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if get_settings().debug else "Internal server error"
    return JSONResponse(status_code=500, content=_error_body("INTERNAL_ERROR", message))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(UdhyogException, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected)

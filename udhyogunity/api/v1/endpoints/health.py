"""Health check endpoints. Used for liveness and readiness probes."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from udhyogunity.core.config import get_settings
from udhyogunity.infrastructure.firebase.client import get_firestore_client
from udhyogunity.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse(version=get_settings().app_version)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Document store not configured", "model": ReadinessErrorResponse}},
)
def readiness_check() -> ReadinessResponse | JSONResponse:
    """Return 200 when a document store client is available; 503 otherwise."""
    settings = get_settings()
    if get_firestore_client() is None:
        return JSONResponse(
            status_code=503,
            content=ReadinessErrorResponse(
                message="Document store not configured",
            ).model_dump(),
        )
    return ReadinessResponse(backend=settings.database_backend)

"""Startup and shutdown for the ratings service."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from udhyogunity.core.config import get_settings
from udhyogunity.infrastructure.firebase.client import close_firebase, init_firebase
from udhyogunity.shared.telemetry.logging import setup_logging
from udhyogunity.shared.telemetry.telemetry import TelemetryConfig, get_telemetry, set_telemetry

logger = logging.getLogger(__name__)


def _start_tracing(app: FastAPI) -> None:
    settings = get_settings()
    telemetry = TelemetryConfig.from_settings(settings)
    if telemetry.setup_telemetry(
        exporter_type=settings.telemetry_exporter,
        otlp_endpoint=settings.telemetry_otlp_endpoint,
        sample_rate=settings.telemetry_sample_rate,
    ) is None:
        return
    telemetry.instrument_fastapi(app)
    set_telemetry(telemetry)


def _stop_tracing() -> None:
    telemetry = get_telemetry()
    if telemetry is not None:
        telemetry.shutdown()
        set_telemetry(None)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Bring up logging, the document store, the media HTTP client, and tracing.

    A missing store is not fatal: storage-backed routes answer 503 and
    /health/ready reports not_ready until it is configured.
    """
    settings = get_settings()
    setup_logging()

    if not init_firebase():
        logger.warning("Document store not configured; storage-backed routes will return 503")
    app.state.http_client = httpx.AsyncClient(timeout=settings.cloudinary_timeout_seconds)
    _start_tracing(app)

    try:
        yield
    finally:
        _stop_tracing()
        await app.state.http_client.aclose()
        app.state.http_client = None
        await close_firebase()
        logger.info("Shutdown complete")

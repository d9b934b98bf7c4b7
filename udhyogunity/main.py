"""ASGI entry point: `uvicorn udhyogunity.main:app`."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from udhyogunity.api.v1 import api_router
from udhyogunity.core.config import get_settings
from udhyogunity.core.exception_handlers import register_exception_handlers
from udhyogunity.core.lifespan import create_lifespan


def create_app() -> FastAPI:
    """Build the ratings API.

    Settings are read here rather than at import so tests can adjust the
    environment and clear the settings cache before building an app.
    """
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Ratings, reviews and business dashboard statistics for UdhyogUnity.",
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    register_exception_handlers(app)

    origins = [origin.strip() for origin in settings.allowed_origins.split(",") if origin.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()

"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from udhyogunity.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from udhyogunity.api.v1.endpoints import (
    businesses,
    dashboard,
    health,
    media,
    payments,
    reviews,
    users,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(businesses.router, prefix="/businesses", tags=["businesses"])
api_router.include_router(reviews.router, prefix="/reviews", tags=["reviews"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(media.router, prefix="/media", tags=["media"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])

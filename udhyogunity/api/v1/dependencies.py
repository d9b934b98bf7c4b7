"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the document store and application use
cases. All use cases are built from infrastructure implementations here;
routes depend only on these dependencies, not on infra directly.

DATABASE_BACKEND selects the Firestore REST client or the in-memory store;
both expose the same API so nothing below branches on it.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from udhyogunity.application.services.identity_resolver import BusinessIdentityResolver
from udhyogunity.application.use_cases.dashboard import GetDashboardStatsUseCase
from udhyogunity.application.use_cases.reviews import (
    RatingAggregationService,
    ReviewedItemsService,
    ReviewService,
)
from udhyogunity.application.use_cases.reviews.rating_aggregation import STRATEGY_COUNTER
from udhyogunity.core.config import Settings, get_settings
from udhyogunity.infrastructure.external.media import CloudinaryUploader
from udhyogunity.infrastructure.firebase.client import DocumentStore, get_firestore_client
from udhyogunity.infrastructure.firebase.repositories import (
    FirestoreBusinessRepository,
    FirestoreCatalogRepository,
    FirestoreReviewRepository,
)
from udhyogunity.infrastructure.firebase.services import FirestoreRatingCounterStore


def _get_store_or_raise() -> DocumentStore:
    """Return the document store or raise HTTPException 503 with standard message."""
    client = get_firestore_client()
    if not client:
        raise HTTPException(
            status_code=503,
            detail="Document store not configured (set FIREBASE_SERVICE_ACCOUNT_KEY or PATH)",
        )
    return client


def get_settings_dep() -> Settings:
    return get_settings()


StoreDep = Annotated[DocumentStore, Depends(_get_store_or_raise)]
SettingsDep = Annotated[Settings, Depends(get_settings_dep)]


def get_business_repo(store: StoreDep) -> FirestoreBusinessRepository:
    return FirestoreBusinessRepository(store)


def get_review_repo(store: StoreDep) -> FirestoreReviewRepository:
    return FirestoreReviewRepository(store)


def get_catalog_repo(store: StoreDep) -> FirestoreCatalogRepository:
    return FirestoreCatalogRepository(store)


def get_identity_resolver(
    business_repo: Annotated[FirestoreBusinessRepository, Depends(get_business_repo)],
) -> BusinessIdentityResolver:
    return BusinessIdentityResolver(business_repo)


def get_dashboard_stats_use_case(
    store: StoreDep,
    resolver: Annotated[BusinessIdentityResolver, Depends(get_identity_resolver)],
    settings: SettingsDep,
) -> GetDashboardStatsUseCase:
    return GetDashboardStatsUseCase(
        store=store,
        resolver=resolver,
        deduplicate=settings.dashboard_deduplicate,
    )


def get_rating_aggregation_service(
    store: StoreDep,
    review_repo: Annotated[FirestoreReviewRepository, Depends(get_review_repo)],
    business_repo: Annotated[FirestoreBusinessRepository, Depends(get_business_repo)],
    catalog_repo: Annotated[FirestoreCatalogRepository, Depends(get_catalog_repo)],
    resolver: Annotated[BusinessIdentityResolver, Depends(get_identity_resolver)],
    settings: SettingsDep,
) -> RatingAggregationService:
    counters = None
    if settings.ratings_aggregation_strategy == STRATEGY_COUNTER:
        counters = FirestoreRatingCounterStore(store)
    return RatingAggregationService(
        review_repo=review_repo,
        business_repo=business_repo,
        catalog_repo=catalog_repo,
        resolver=resolver,
        counters=counters,
        strategy=settings.ratings_aggregation_strategy,
        exclude_hidden=settings.ratings_exclude_hidden_reviews,
    )


def get_review_service(
    review_repo: Annotated[FirestoreReviewRepository, Depends(get_review_repo)],
    aggregation: Annotated[RatingAggregationService, Depends(get_rating_aggregation_service)],
    settings: SettingsDep,
) -> ReviewService:
    return ReviewService(
        review_repo=review_repo,
        aggregation=aggregation,
        page_size_default=settings.review_page_size_default,
        page_size_max=settings.review_page_size_max,
    )


def get_reviewed_items_service(
    review_repo: Annotated[FirestoreReviewRepository, Depends(get_review_repo)],
) -> ReviewedItemsService:
    return ReviewedItemsService(review_repo)


def get_cloudinary_uploader(request: Request, settings: SettingsDep) -> CloudinaryUploader:
    """Uploader sharing the app's HTTP client (created in lifespan)."""
    if not settings.cloudinary_cloud_name or not settings.cloudinary_upload_preset:
        raise HTTPException(
            status_code=503,
            detail="Media uploads not configured (set CLOUDINARY_CLOUD_NAME and CLOUDINARY_UPLOAD_PRESET)",
        )
    return CloudinaryUploader(
        cloud_name=settings.cloudinary_cloud_name,
        upload_preset=settings.cloudinary_upload_preset,
        http_client=getattr(request.app.state, "http_client", None),
        timeout=settings.cloudinary_timeout_seconds,
    )

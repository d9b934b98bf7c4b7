"""Pytest configuration and fixtures for udhyogunity.

Tests run against the in-memory document store (DATABASE_BACKEND=memory)
with telemetry off. The environment is set before the app is imported so
that create_app() sees it.
"""

import os
from collections.abc import AsyncIterator
from datetime import datetime, timedelta

os.environ["DATABASE_BACKEND"] = "memory"
os.environ["TELEMETRY_ENABLED"] = "false"

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from udhyogunity.application.services.identity_resolver import BusinessIdentityResolver  # noqa: E402
from udhyogunity.application.use_cases.reviews import (  # noqa: E402
    RatingAggregationService,
    ReviewedItemsService,
    ReviewService,
)
from udhyogunity.core.config import get_settings  # noqa: E402
from udhyogunity.infrastructure.firebase.client import set_firestore_client  # noqa: E402
from udhyogunity.infrastructure.firebase.memory_client import InMemoryFirestoreClient  # noqa: E402
from udhyogunity.infrastructure.firebase.repositories import (  # noqa: E402
    FirestoreBusinessRepository,
    FirestoreCatalogRepository,
    FirestoreReviewRepository,
)

get_settings.cache_clear()

from udhyogunity.main import app  # noqa: E402

from tests.factories import FIXED_NOW  # noqa: E402


class TickingClock:
    """Deterministic clock: each call is one second after the previous one."""

    def __init__(self, start: datetime = FIXED_NOW) -> None:
        self.current = start

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def store(clock: TickingClock) -> InMemoryFirestoreClient:
    """Empty in-memory document store with a ticking clock for server timestamps."""
    return InMemoryFirestoreClient(clock=clock)


@pytest.fixture
def business_repo(store: InMemoryFirestoreClient) -> FirestoreBusinessRepository:
    return FirestoreBusinessRepository(store)


@pytest.fixture
def catalog_repo(store: InMemoryFirestoreClient) -> FirestoreCatalogRepository:
    return FirestoreCatalogRepository(store)


@pytest.fixture
def review_repo(store: InMemoryFirestoreClient) -> FirestoreReviewRepository:
    return FirestoreReviewRepository(store)


@pytest.fixture
def resolver(business_repo: FirestoreBusinessRepository) -> BusinessIdentityResolver:
    return BusinessIdentityResolver(business_repo)


@pytest.fixture
def aggregation(
    review_repo: FirestoreReviewRepository,
    business_repo: FirestoreBusinessRepository,
    catalog_repo: FirestoreCatalogRepository,
    resolver: BusinessIdentityResolver,
) -> RatingAggregationService:
    return RatingAggregationService(
        review_repo=review_repo,
        business_repo=business_repo,
        catalog_repo=catalog_repo,
        resolver=resolver,
    )


@pytest.fixture
def review_service(
    review_repo: FirestoreReviewRepository,
    aggregation: RatingAggregationService,
    clock: TickingClock,
) -> ReviewService:
    return ReviewService(review_repo=review_repo, aggregation=aggregation, clock=clock)


@pytest.fixture
def reviewed_items(review_repo: FirestoreReviewRepository) -> ReviewedItemsService:
    return ReviewedItemsService(review_repo)


@pytest.fixture
async def client(store: InMemoryFirestoreClient) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI), backed by the test store."""
    set_firestore_client(store)
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        set_firestore_client(None)

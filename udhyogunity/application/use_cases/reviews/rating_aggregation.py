"""Aggregate rating maintenance for businesses, products and services.

Two strategies keep the denormalized {rating, reviewCount} pair current:

- recompute (default): read every review in the composite collection, average,
  write. This is a plain read-aggregate-write with no concurrency control, so
  two concurrent reviewers can lose an update; the last writer wins.
- counter: keep a RatingCounters/{scope} document updated with atomic
  increments and write the aggregate from it. The first mutation of a scope
  seeds the counter from a full recompute.

Product aggregates additionally roll up into the owning business, overwriting
any business-level review aggregate with the product blend.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from udhyogunity.application.dtos.review import AverageRatingResult, ReviewStats
from udhyogunity.application.interfaces.repositories import (
    IBusinessRepository,
    ICatalogRepository,
    IRatingCounterStore,
    IReviewRepository,
)
from udhyogunity.application.services.identity_resolver import BusinessIdentityResolver
from udhyogunity.application.services.rating_calculator import (
    blend_product_ratings,
    review_stats_from,
    round_rating,
    summarize_reviews,
)
from udhyogunity.domain.entities import CatalogItem
from udhyogunity.domain.enums import ReviewType
from udhyogunity.domain.exceptions import (
    NotFoundException,
    TransientStorageException,
    ValidationException,
)
from udhyogunity.infrastructure.firebase.collections import (
    SUBCOLLECTION_SERVICES_ACTIVE_LEGACY,
    review_collection_path,
)
from udhyogunity.infrastructure.firebase.services.rating_counter_firestore import counter_scope
from udhyogunity.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)

STRATEGY_RECOMPUTE = "recompute"
STRATEGY_COUNTER = "counter"

# Service aggregates are always written under ActiveServices, even for
# services stored under Active.
SERVICE_AGGREGATE_SHELF = SUBCOLLECTION_SERVICES_ACTIVE_LEGACY


@dataclass(frozen=True)
class ProductLocation:
    """Where a product actually lives."""

    business_key: str
    shelf: str
    product: CatalogItem


def review_path(review_type: ReviewType, business_id: str, item_id: str | None) -> str:
    """Composite review collection path; item_id is required for product and service reviews."""
    if not business_id:
        raise ValidationException("business_id is required", field="business_id")
    if review_type.requires_item and not item_id:
        raise ValidationException(
            f"item_id is required for {review_type.value} reviews", field="item_id"
        )
    return review_collection_path(review_type, business_id, item_id)


class RatingAggregationService:
    """Recomputes and writes aggregate ratings after review mutations."""

    def __init__(
        self,
        review_repo: IReviewRepository,
        business_repo: IBusinessRepository,
        catalog_repo: ICatalogRepository,
        resolver: BusinessIdentityResolver,
        counters: IRatingCounterStore | None = None,
        strategy: str = STRATEGY_RECOMPUTE,
        exclude_hidden: bool = False,
    ) -> None:
        if strategy == STRATEGY_COUNTER and counters is None:
            raise ValueError("counter strategy requires a rating counter store")
        self.review_repo = review_repo
        self.business_repo = business_repo
        self.catalog_repo = catalog_repo
        self.resolver = resolver
        self.counters = counters
        self.strategy = strategy
        self.exclude_hidden = exclude_hidden

    # Product ownership

    async def find_product_owner(self, item_id: str) -> ProductLocation | None:
        """Slow path: probe Available/Unavailable under every key in Products.

        O(businesses) point reads. Handles products whose stored businessId
        does not match the key they are filed under.
        """
        try:
            keys = await self.catalog_repo.list_product_owner_keys()
        except TransientStorageException as e:
            logger.warning("Could not list product owners while searching for %s: %s", item_id, e.message)
            return None
        for key in keys:
            try:
                found = await self.catalog_repo.find_product(key, item_id)
            except TransientStorageException as e:
                logger.warning("Product probe under %s failed: %s", key, e.message)
                continue
            if found:
                shelf, product = found
                logger.info("Product %s found under business %s by owner scan", item_id, key)
                return ProductLocation(key, shelf, product)
        return None

    async def locate_product(self, business_id: str, item_id: str) -> ProductLocation | None:
        """Fast path under the resolved business key, then the owner scan."""
        key = await self.resolver.resolve_business_key(business_id) or business_id
        try:
            found = await self.catalog_repo.find_product(key, item_id)
        except TransientStorageException as e:
            logger.warning("Product lookup under %s failed: %s", key, e.message)
            found = None
        if found:
            shelf, product = found
            return ProductLocation(key, shelf, product)
        return await self.find_product_owner(item_id)

    # Aggregate writes

    async def _write_aggregate(
        self,
        review_type: ReviewType,
        business_id: str,
        item_id: str | None,
        result: AverageRatingResult,
    ) -> None:
        rating, count = result.average_rating, result.review_count
        try:
            if review_type is ReviewType.BUSINESS:
                if not await self.business_repo.update_rating(business_id, rating, count):
                    raise NotFoundException("business", business_id)
            elif review_type is ReviewType.SERVICE:
                written = await self.catalog_repo.update_service_rating(
                    business_id, SERVICE_AGGREGATE_SHELF, item_id, rating, count
                )
                if not written:
                    raise NotFoundException("service", item_id)
            else:
                location = await self.locate_product(business_id, item_id)
                if location is None:
                    raise NotFoundException("product", item_id)
                written = await self.catalog_repo.update_product_rating(
                    location.business_key, location.shelf, item_id, rating, count
                )
                if not written:
                    raise NotFoundException("product", item_id)
                await self.recompute_business_rollup(location.business_key)
        except TransientStorageException:
            logger.exception(
                "Failed to write %s aggregate for %s/%s", review_type.value, business_id, item_id
            )
            raise

    async def recompute_business_rollup(self, business_key: str) -> AverageRatingResult | None:
        """Overwrite the business aggregate with the blend of all its products."""
        products = await self.catalog_repo.list_products(business_key)
        rating, count = blend_product_ratings(products)
        if not await self.business_repo.update_rating(business_key, rating, count):
            logger.warning("No business document %s to receive product rollup", business_key)
            return None
        return AverageRatingResult(average_rating=rating, review_count=count)

    async def _recompute(self, path: str) -> tuple[AverageRatingResult, float]:
        """Return the aggregate and the unrounded rating sum."""
        reviews = await self.review_repo.list_all(path)
        tally = summarize_reviews(reviews, exclude_hidden=self.exclude_hidden).tally
        result = AverageRatingResult(
            average_rating=round_rating(tally.average),
            review_count=tally.count,
        )
        return result, tally.total

    @traced("reviews.update_average_rating")
    async def update_average_rating(
        self,
        review_type: ReviewType,
        business_id: str,
        item_id: str | None = None,
    ) -> AverageRatingResult:
        """Recompute from every review and write the aggregate.

        A failed review read raises before anything is written. In counter mode
        the counter is reseeded with the recomputed values.
        """
        path = review_path(review_type, business_id, item_id)
        result, total = await self._recompute(path)
        if self.counters is not None:
            scope = counter_scope(review_type, business_id, item_id)
            await self.counters.reseed(scope, total, result.review_count)
        await self._write_aggregate(review_type, business_id, item_id, result)
        logger.info(
            "Updated %s aggregate for %s/%s: %.1f over %d reviews",
            review_type.value,
            business_id,
            item_id,
            result.average_rating,
            result.review_count,
        )
        return result

    # Mutation hooks

    async def _from_counter(
        self, review_type: ReviewType, business_id: str, item_id: str | None, scope: str
    ) -> AverageRatingResult:
        total, count = await self.counters.read(scope)
        result = AverageRatingResult(
            average_rating=round_rating(total / count) if count else 0.0,
            review_count=count,
        )
        await self._write_aggregate(review_type, business_id, item_id, result)
        return result

    async def _counter_ready(self, review_type: ReviewType, business_id: str, item_id: str | None) -> str | None:
        """Scope to increment, or None if this call seeded it (already current)."""
        scope = counter_scope(review_type, business_id, item_id)
        if await self.counters.exists(scope):
            return scope
        logger.info("Seeding rating counter %s from existing reviews", scope)
        return None

    async def on_review_added(
        self, review_type: ReviewType, business_id: str, item_id: str | None, rating: float
    ) -> AverageRatingResult:
        if self.strategy != STRATEGY_COUNTER:
            return await self.update_average_rating(review_type, business_id, item_id)
        scope = await self._counter_ready(review_type, business_id, item_id)
        if scope is None:
            return await self.update_average_rating(review_type, business_id, item_id)
        await self.counters.record(scope, rating)
        return await self._from_counter(review_type, business_id, item_id, scope)

    async def on_review_changed(
        self,
        review_type: ReviewType,
        business_id: str,
        item_id: str | None,
        old_rating: float | None,
        new_rating: float | None,
    ) -> AverageRatingResult:
        if self.strategy != STRATEGY_COUNTER:
            return await self.update_average_rating(review_type, business_id, item_id)
        scope = await self._counter_ready(review_type, business_id, item_id)
        if scope is None:
            return await self.update_average_rating(review_type, business_id, item_id)
        if old_rating is not None and new_rating is not None:
            await self.counters.adjust(scope, old_rating, new_rating)
        elif new_rating is not None:
            await self.counters.record(scope, new_rating)
        elif old_rating is not None:
            await self.counters.retract(scope, old_rating)
        return await self._from_counter(review_type, business_id, item_id, scope)

    async def on_review_removed(
        self,
        review_type: ReviewType,
        business_id: str,
        item_id: str | None,
        rating: float | None,
    ) -> AverageRatingResult:
        if self.strategy != STRATEGY_COUNTER:
            return await self.update_average_rating(review_type, business_id, item_id)
        scope = await self._counter_ready(review_type, business_id, item_id)
        if scope is None:
            return await self.update_average_rating(review_type, business_id, item_id)
        if rating is not None:
            await self.counters.retract(scope, rating)
        return await self._from_counter(review_type, business_id, item_id, scope)

    # Read-only stats

    async def get_review_stats(
        self,
        review_type: ReviewType | str | None,
        business_id: str | None,
        item_id: str | None = None,
    ) -> ReviewStats:
        """Average, count and 1..5 histogram. Never raises; zeros on any failure."""
        if not review_type or not business_id:
            return ReviewStats()
        try:
            review_type = ReviewType(review_type)
            path = review_path(review_type, business_id, item_id)
            reviews = await self.review_repo.list_all(path)
        except (ValueError, ValidationException, TransientStorageException) as e:
            logger.warning("Review stats unavailable for %s/%s: %s", business_id, item_id, e)
            return ReviewStats()
        return review_stats_from(summarize_reviews(reviews, exclude_hidden=self.exclude_hidden))

"""Review use cases: create, page, edit, delete and respond.

Reviews are stored under the composite path built from the identifier the
caller passed (Reviews/Businesses/{b}, Reviews/Products/{b}_{item}, ...).
Mutations raise; the aggregate is brought up to date before they return.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from udhyogunity.application.dtos.review import ReviewIndexEntry, ReviewPage, ReviewResult
from udhyogunity.application.interfaces.repositories import IReviewRepository
from udhyogunity.application.interfaces.store import ISnapshot
from udhyogunity.application.use_cases.reviews.rating_aggregation import (
    RatingAggregationService,
    review_path,
)
from udhyogunity.domain.entities import Review
from udhyogunity.domain.enums import ReviewStatus, ReviewType
from udhyogunity.domain.exceptions import (
    NotFoundException,
    TransientStorageException,
    ValidationException,
)
from udhyogunity.shared.telemetry.tracing import add_span_attributes, traced
from udhyogunity.shared.utils.datetime import utc_now
from udhyogunity.shared.utils.numbers import is_number

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5
EDITABLE_FIELDS = frozenset({"rating", "comment"})
LEGACY_CURSOR_PREFIX = "Ratings/"

_EPOCH = datetime.min


def coerce_review_type(value: ReviewType | str | None) -> ReviewType:
    if isinstance(value, ReviewType):
        return value
    try:
        return ReviewType(value)
    except ValueError:
        raise ValidationException(
            f"type must be one of {ReviewType.values()}, got: {value!r}", field="type"
        ) from None


def validate_rating(rating: Any) -> int:
    """Whole number of stars from 1 to 5. Integral floats such as 4.0 are accepted as ints."""
    if is_number(rating) and float(rating).is_integer() and MIN_RATING <= rating <= MAX_RATING:
        return int(rating)
    raise ValidationException(
        f"Rating must be a whole number between {MIN_RATING} and {MAX_RATING}", field="rating"
    )


def _newest_first(review: Review) -> tuple[bool, datetime]:
    created = review.created_at
    return (created is not None, created.replace(tzinfo=None) if created else _EPOCH)


class ReviewService:
    """Review lifecycle on composite paths."""

    def __init__(
        self,
        review_repo: IReviewRepository,
        aggregation: RatingAggregationService,
        page_size_default: int = 10,
        page_size_max: int = 50,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.review_repo = review_repo
        self.aggregation = aggregation
        self.page_size_default = page_size_default
        self.page_size_max = page_size_max
        self.clock = clock

    def _page_size(self, page_size: int | None) -> int:
        if not page_size or page_size < 1:
            return self.page_size_default
        return min(page_size, self.page_size_max)

    async def _require(self, path: str, review_id: str) -> tuple[Review, ISnapshot]:
        found = await self.review_repo.get(path, review_id)
        if found is None:
            raise NotFoundException("review", review_id)
        return found

    @traced("reviews.add_review")
    async def add_review(
        self,
        review_type: ReviewType | str,
        business_id: str,
        user_id: str,
        user_name: str,
        rating: Any,
        comment: str = "",
        item_id: str | None = None,
        user_photo_url: str | None = None,
        related_order_id: str | None = None,
    ) -> ReviewResult:
        """Validate, write the review, update aggregates, index it for the author.

        Nothing is written when validation fails or the product cannot be found.
        """
        review_type = coerce_review_type(review_type)
        for field, value in (("business_id", business_id), ("user_id", user_id), ("user_name", user_name)):
            if not value:
                raise ValidationException(f"{field} is required", field=field)
        if rating is None:
            raise ValidationException("rating is required", field="rating")
        rating = validate_rating(rating)
        path = review_path(review_type, business_id, item_id)

        if review_type is ReviewType.PRODUCT:
            if await self.aggregation.locate_product(business_id, item_id) is None:
                raise NotFoundException("product", item_id)

        data: dict[str, Any] = {
            "type": review_type.value,
            "businessId": business_id,
            "itemId": item_id,
            "userId": user_id,
            "userName": user_name,
            "userPhotoURL": user_photo_url or "",
            "rating": rating,
            "comment": comment or "",
            "status": ReviewStatus.ACTIVE.value,
            "businessResponse": None,
        }
        if related_order_id:
            data["orderOrBookingId"] = related_order_id

        try:
            review_id = await self.review_repo.create(path, data)
        except TransientStorageException:
            logger.exception("Failed to write review under %s", path)
            raise
        add_span_attributes(review_id=review_id)
        logger.info("Review %s added under %s (rating=%s)", review_id, path, rating)

        await self.aggregation.on_review_added(review_type, business_id, item_id, float(rating))
        await self.review_repo.add_user_index(
            user_id,
            ReviewIndexEntry(
                review_id=review_id,
                review_type=review_type,
                business_id=business_id,
                item_id=item_id,
            ),
        )

        now = self.clock()
        review = Review.from_document(review_id, {**data, "createdAt": now, "updatedAt": now})
        return ReviewResult(review, review_type, business_id, item_id)

    @traced("reviews.get_reviews")
    async def get_reviews(
        self,
        review_type: ReviewType | str,
        business_id: str,
        item_id: str | None = None,
        page_size: int | None = None,
        cursor: ISnapshot | str | None = None,
    ) -> ReviewPage:
        """Newest-first page from the composite path.

        cursor is the last_visible snapshot of the previous page or its review
        id. An empty first page falls back once to the flat Ratings collection;
        pages of that fallback carry Ratings snapshots as cursors.
        """
        review_type = coerce_review_type(review_type)
        path = review_path(review_type, business_id, item_id)
        size = self._page_size(page_size)

        if isinstance(cursor, str):
            cursor = await self._resolve_cursor(path, cursor)
        if cursor is not None and cursor.path.startswith(LEGACY_CURSOR_PREFIX):
            return await self._legacy_page(review_type, business_id, item_id, size, cursor.id)

        try:
            rows = await self.review_repo.list_page(path, size, cursor)
        except TransientStorageException as e:
            logger.warning("Review page read failed on %s: %s", path, e.message)
            rows = []

        if rows:
            results = [ReviewResult(review, review_type, business_id, item_id) for review, _ in rows]
            return ReviewPage(reviews=results, last_visible=rows[-1][1])
        if cursor is None:
            return await self._legacy_page(review_type, business_id, item_id, size, None)
        return ReviewPage(reviews=[])

    async def _resolve_cursor(self, path: str, cursor_id: str) -> ISnapshot:
        found = await self.review_repo.get(path, cursor_id)
        if found is not None:
            return found[1]
        legacy = await self.review_repo.get_legacy_rating(cursor_id)
        if legacy is not None:
            return legacy
        raise ValidationException(f"Unknown page cursor: {cursor_id}", field="cursor")

    async def _legacy_page(
        self,
        review_type: ReviewType,
        business_id: str,
        item_id: str | None,
        size: int,
        after_id: str | None,
    ) -> ReviewPage:
        """Ratings fallback: one equality filter, item filter and ordering in memory."""
        try:
            rows = await self.review_repo.list_legacy_ratings(business_id)
        except TransientStorageException as e:
            logger.warning("Ratings fallback failed for %s: %s", business_id, e.message)
            return ReviewPage(reviews=[])
        if item_id:
            rows = [(review, snap) for review, snap in rows if snap.get("itemId") == item_id]
        rows.sort(key=lambda row: _newest_first(row[0]), reverse=True)
        if after_id is not None:
            ids = [snap.id for _, snap in rows]
            rows = rows[ids.index(after_id) + 1:] if after_id in ids else []
        rows = rows[:size]
        if not rows:
            return ReviewPage(reviews=[])
        logger.debug("Served %d reviews for %s from Ratings", len(rows), business_id)
        results = [ReviewResult(review, review_type, business_id, item_id) for review, _ in rows]
        return ReviewPage(reviews=results, last_visible=rows[-1][1])

    async def get_review_by_id(
        self,
        review_type: ReviewType | str,
        business_id: str,
        review_id: str,
        item_id: str | None = None,
    ) -> ReviewResult:
        review_type = coerce_review_type(review_type)
        path = review_path(review_type, business_id, item_id)
        review, _ = await self._require(path, review_id)
        return ReviewResult(review, review_type, business_id, item_id)

    @traced("reviews.update_review")
    async def update_review(
        self,
        review_type: ReviewType | str,
        business_id: str,
        review_id: str,
        updates: dict[str, Any],
        item_id: str | None = None,
    ) -> ReviewResult:
        """Author edit of rating and/or comment. Aggregates recompute only when rating is sent."""
        review_type = coerce_review_type(review_type)
        if not updates:
            raise ValidationException("No fields to update")
        rejected = sorted(set(updates) - EDITABLE_FIELDS)
        if rejected:
            raise ValidationException(
                f"Fields not editable: {', '.join(rejected)}", field=rejected[0]
            )
        updates = dict(updates)
        if "rating" in updates:
            updates["rating"] = validate_rating(updates["rating"])
        path = review_path(review_type, business_id, item_id)
        existing, _ = await self._require(path, review_id)

        if not await self.review_repo.update(path, review_id, updates):
            raise NotFoundException("review", review_id)
        if "rating" in updates:
            await self.aggregation.on_review_changed(
                review_type, business_id, item_id, existing.rating, float(updates["rating"])
            )
        review, _ = await self._require(path, review_id)
        return ReviewResult(review, review_type, business_id, item_id)

    @traced("reviews.delete_review")
    async def delete_review(
        self,
        review_type: ReviewType | str,
        business_id: str,
        review_id: str,
        item_id: str | None = None,
    ) -> bool:
        """Delete and recompute. Deleting a missing review still recomputes."""
        review_type = coerce_review_type(review_type)
        path = review_path(review_type, business_id, item_id)
        found = await self.review_repo.get(path, review_id)
        existing = found[0] if found else None

        await self.review_repo.delete(path, review_id)
        if existing is not None and existing.user_id:
            await self.review_repo.remove_user_index(existing.user_id, review_id)
        await self.aggregation.on_review_removed(
            review_type, business_id, item_id, existing.rating if existing else None
        )
        logger.info("Review %s deleted from %s", review_id, path)
        return True

    @traced("reviews.respond_to_review")
    async def respond_to_review(
        self,
        review_type: ReviewType | str,
        business_id: str,
        review_id: str,
        response_text: str | None,
        item_id: str | None = None,
    ) -> ReviewResult:
        """Business reply; aggregates are untouched."""
        review_type = coerce_review_type(review_type)
        if not response_text or not response_text.strip():
            raise ValidationException("Response text is required", field="response_text")
        path = review_path(review_type, business_id, item_id)
        if not await self.review_repo.set_response(path, review_id, response_text.strip()):
            raise NotFoundException("review", review_id)
        review, _ = await self._require(path, review_id)
        return ReviewResult(review, review_type, business_id, item_id)

    async def get_user_reviews(self, user_id: str) -> list[ReviewResult]:
        """Reviews written by a user, newest first, via the UserReviews index."""
        entries = await self.review_repo.list_user_index(user_id)

        async def load(entry: ReviewIndexEntry) -> ReviewResult | None:
            path = review_path(entry.review_type, entry.business_id, entry.item_id)
            found = await self.review_repo.get(path, entry.review_id)
            if found is None:
                return None
            return ReviewResult(found[0], entry.review_type, entry.business_id, entry.item_id)

        loaded = await asyncio.gather(*(load(entry) for entry in entries), return_exceptions=True)
        results: list[ReviewResult] = []
        for entry, item in zip(entries, loaded):
            if isinstance(item, BaseException):
                logger.warning("Could not load review %s for user %s: %s", entry.review_id, user_id, item)
            elif item is not None:
                results.append(item)
        results.sort(key=lambda r: _newest_first(r.review), reverse=True)
        return results

    async def get_recent_business_reviews(self, business_id: str, limit: int = 5) -> list[ReviewResult]:
        path = review_path(ReviewType.BUSINESS, business_id, None)
        reviews = await self.review_repo.list_recent(path, limit)
        return [ReviewResult(review, ReviewType.BUSINESS, business_id) for review in reviews]

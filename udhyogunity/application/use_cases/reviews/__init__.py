"""Review use cases: lifecycle, aggregate maintenance, reviewed-items ledger."""

from udhyogunity.application.use_cases.reviews.rating_aggregation import (
    ProductLocation,
    RatingAggregationService,
)
from udhyogunity.application.use_cases.reviews.review_operations import ReviewService
from udhyogunity.application.use_cases.reviews.reviewed_items import ReviewedItemsService

__all__ = [
    "ProductLocation",
    "RatingAggregationService",
    "ReviewService",
    "ReviewedItemsService",
]

"""Rating arithmetic shared by the review engine and the dashboard.

Averages round half up to one decimal, the way the web client rounded
(Math.round(x * 10) / 10), not Python's banker's rounding.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from udhyogunity.application.dtos.review import ReviewStats
from udhyogunity.domain.entities import CatalogItem, Review
from udhyogunity.domain.enums import ReviewStatus
from udhyogunity.shared.utils.numbers import is_number

_EXCLUDED_STATUSES = frozenset({ReviewStatus.HIDDEN, ReviewStatus.REPORTED})


def round_rating(value: float) -> float:
    """Round half up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def rating_value(raw: Any) -> float | None:
    """A stored rating counts only when it is a non-zero number."""
    if is_number(raw) and raw:
        return float(raw)
    return None


@dataclass
class RatingTally:
    """Running sum and count."""

    total: float = 0.0
    count: int = 0

    def add(self, rating: float, weight: int = 1) -> None:
        self.total += rating * weight
        self.count += weight

    @property
    def average(self) -> float:
        return self.total / self.count if self.count else 0.0


@dataclass
class ReviewSummary:
    tally: RatingTally = field(default_factory=RatingTally)
    histogram: dict[int, int] = field(default_factory=lambda: {star: 0 for star in range(1, 6)})


def summarize_reviews(reviews: Iterable[Review], exclude_hidden: bool = False) -> ReviewSummary:
    """Sum and bucket every review with a usable rating.

    Status is ignored unless exclude_hidden is set, matching historical aggregates.
    Ratings outside 1..5 count toward the average but land in no bucket.
    """
    summary = ReviewSummary()
    for review in reviews:
        if not review.counts_toward_aggregate:
            continue
        if exclude_hidden and review.status in _EXCLUDED_STATUSES:
            continue
        summary.tally.add(review.rating)
        if 1 <= review.rating <= 5:
            summary.histogram[math.floor(review.rating)] += 1
    return summary


def review_stats_from(summary: ReviewSummary) -> ReviewStats:
    count = summary.tally.count
    percentages = {
        star: (n / count) * 100 if count else 0 for star, n in summary.histogram.items()
    }
    return ReviewStats(
        average_rating=round_rating(summary.tally.average),
        review_count=count,
        rating_counts=dict(summary.histogram),
        rating_percentages=percentages,
    )


def blend_product_ratings(products: Iterable[CatalogItem]) -> tuple[float, int]:
    """Business rollup from its products.

    Products with a positive reviewCount weigh rating by that count; products
    with a rating but no count weigh 1 in a separate simple bucket. The buckets
    are merged into one mean. Returns (rounded average, combined count).
    """
    weighted = RatingTally()
    simple = RatingTally()
    for product in products:
        rating = rating_value(product.rating)
        if rating is None:
            continue
        if product.review_count:
            weighted.add(rating, product.review_count)
        else:
            simple.add(rating)
    if not weighted.count and not simple.count:
        return 0.0, 0
    if not simple.count:
        return round_rating(weighted.average), weighted.count
    if not weighted.count:
        return round_rating(simple.average), simple.count
    count = weighted.count + simple.count
    return round_rating((weighted.total + simple.total) / count), count

"""DTOs for review use cases."""

from dataclasses import dataclass, field
from typing import Any

from udhyogunity.domain.entities import Review
from udhyogunity.domain.enums import ReviewType


@dataclass(frozen=True)
class ReviewResult:
    """A review plus the entity it rates."""

    review: Review
    review_type: ReviewType
    business_id: str
    item_id: str | None = None


@dataclass(frozen=True)
class ReviewPage:
    """One page of reviews. last_visible is the cursor for the next page (None when empty)."""

    reviews: list[ReviewResult]
    last_visible: Any = None

    @property
    def next_cursor(self) -> str | None:
        return self.last_visible.id if self.last_visible is not None else None


@dataclass(frozen=True)
class AverageRatingResult:
    average_rating: float
    review_count: int


def _empty_buckets() -> dict[int, float]:
    return {star: 0 for star in range(1, 6)}


@dataclass(frozen=True)
class ReviewStats:
    """Read-only aggregate over one composite review collection."""

    average_rating: float = 0.0
    review_count: int = 0
    rating_counts: dict[int, int] = field(default_factory=_empty_buckets)
    rating_percentages: dict[int, float] = field(default_factory=_empty_buckets)


@dataclass(frozen=True)
class ReviewIndexEntry:
    """Pointer stored under UserReviews/{uid}/Reviews/{reviewId}."""

    review_id: str
    review_type: ReviewType
    business_id: str
    item_id: str | None = None

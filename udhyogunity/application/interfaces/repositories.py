"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities or application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from udhyogunity.application.dtos.review import ReviewIndexEntry
    from udhyogunity.application.interfaces.store import ISnapshot
    from udhyogunity.domain.entities import Business, CatalogItem, Review


class IBusinessRepository(Protocol):
    """Protocol for business documents (Businesses/{key})."""

    async def get(self, key: str) -> Business | None:
        """Return business stored under key, or None."""

    async def find_keys_by_field(self, field: str, value: str) -> list[str]:
        """Return keys of businesses whose field equals value (indexed lookup)."""

    async def find_by_email(self, email: str) -> list[Business]:
        """Return businesses whose email field equals email."""

    async def list_all(self) -> list[Business]:
        """Return every business. O(n) over the collection; slow path only."""

    async def update_rating(self, key: str, rating: float, review_count: int) -> bool:
        """Overwrite {rating, reviewCount}; False if the business document is missing."""


class ICatalogRepository(Protocol):
    """Protocol for products and services stored under business-scoped shelves."""

    async def find_product(self, business_key: str, item_id: str) -> tuple[str, CatalogItem] | None:
        """Return (shelf, product) from Available then Unavailable, or None."""

    async def list_product_owner_keys(self) -> list[str]:
        """Return every business key under Products (including keys with no document)."""

    async def list_products(self, business_key: str) -> list[CatalogItem]:
        """Return products from both shelves."""

    async def update_product_rating(
        self, business_key: str, shelf: str, item_id: str, rating: float, review_count: int
    ) -> bool:
        """Overwrite {rating, reviewCount} on a product; False if missing."""

    async def update_service_rating(
        self, business_key: str, shelf: str, item_id: str, rating: float, review_count: int
    ) -> bool:
        """Overwrite {rating, reviewCount} on a service; False if missing."""


class IReviewRepository(Protocol):
    """Protocol for review documents under composite review paths."""

    async def create(self, collection_path: str, data: dict[str, Any]) -> str:
        """Create a review with a generated ID and server timestamps; return the ID."""

    async def get(self, collection_path: str, review_id: str) -> tuple[Review, ISnapshot] | None:
        """Return the review and its snapshot (usable as a page cursor), or None."""

    async def list_page(
        self, collection_path: str, page_size: int, start_after: ISnapshot | None = None
    ) -> list[tuple[Review, ISnapshot]]:
        """Return reviews newest first, starting after the cursor."""

    async def list_recent(self, collection_path: str, limit: int) -> list[Review]:
        """Return up to limit reviews, newest first."""

    async def list_all(self, collection_path: str) -> list[Review]:
        """Return every review in the collection (unordered)."""

    async def update(self, collection_path: str, review_id: str, data: dict[str, Any]) -> bool:
        """Update fields and touch updatedAt; False if the review is missing."""

    async def set_response(self, collection_path: str, review_id: str, text: str) -> bool:
        """Write businessResponse {text, createdAt}; False if the review is missing."""

    async def delete(self, collection_path: str, review_id: str) -> None:
        """Delete the review (idempotent)."""

    async def get_legacy_rating(self, rating_id: str) -> ISnapshot | None:
        """Return a document from the flat Ratings collection, or None."""

    async def list_legacy_ratings(self, business_id: str) -> list[tuple[Review, ISnapshot]]:
        """Return Ratings documents whose businessId equals business_id."""

    async def add_user_index(self, user_id: str, entry: ReviewIndexEntry) -> None:
        """Record a review pointer under UserReviews/{uid}/Reviews."""

    async def remove_user_index(self, user_id: str, review_id: str) -> None:
        """Remove a review pointer (idempotent)."""

    async def list_user_index(self, user_id: str) -> list[ReviewIndexEntry]:
        """Return every review pointer recorded for the user."""

    async def reviewed_item_exists(self, user_id: str, entry_id: str) -> bool:
        """Whether Users/{uid}/ReviewedItems/{entry_id} exists."""

    async def put_reviewed_item(self, user_id: str, entry_id: str, data: dict[str, Any]) -> None:
        """Create or overwrite Users/{uid}/ReviewedItems/{entry_id} (stamps reviewedAt)."""


class IRatingCounterStore(Protocol):
    """Protocol for running sum/count counters keyed by review scope."""

    async def record(self, scope: str, rating: float) -> None:
        """Add one rating to the scope."""

    async def retract(self, scope: str, rating: float) -> None:
        """Remove one rating from the scope."""

    async def adjust(self, scope: str, old_rating: float, new_rating: float) -> None:
        """Replace a rating already counted in the scope."""

    async def exists(self, scope: str) -> bool:
        """Whether the scope has been seeded."""

    async def read(self, scope: str) -> tuple[float, int]:
        """Return (sum, count) for the scope; zeros when absent."""

    async def reseed(self, scope: str, total: float, count: int) -> None:
        """Overwrite the counter with an exact recomputation."""

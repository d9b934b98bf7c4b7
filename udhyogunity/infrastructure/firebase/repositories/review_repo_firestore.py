"""Firestore-backed review repository (implements IReviewRepository)."""

from __future__ import annotations

from typing import Any

from udhyogunity.application.dtos.review import ReviewIndexEntry
from udhyogunity.application.interfaces.store import IDocumentStore, ISnapshot
from udhyogunity.domain.entities import Review
from udhyogunity.domain.enums import ReviewType
from udhyogunity.infrastructure.exceptions import DocumentNotFoundError
from udhyogunity.infrastructure.firebase.collections import (
    COLLECTION_RATINGS,
    reviewed_items_path,
    user_reviews_path,
)
from udhyogunity.infrastructure.firebase.document import SERVER_TIMESTAMP

_NEWEST_FIRST = "DESCENDING"


class FirestoreReviewRepository:
    """Reviews under composite paths plus the per-user index and reviewed-items ledger."""

    def __init__(self, client: IDocumentStore) -> None:
        self._client = client

    async def create(self, collection_path: str, data: dict[str, Any]) -> str:
        """Create with server-assigned createdAt/updatedAt; return the generated ID."""
        ref = await self._client.collection(collection_path).add(
            {**data, "createdAt": SERVER_TIMESTAMP, "updatedAt": SERVER_TIMESTAMP}
        )
        return ref.id

    async def get(self, collection_path: str, review_id: str) -> tuple[Review, ISnapshot] | None:
        doc = await self._client.collection(collection_path).document(review_id).get()
        if not doc:
            return None
        return Review.from_document(doc.id, doc.to_dict()), doc

    async def list_page(
        self, collection_path: str, page_size: int, start_after: ISnapshot | None = None
    ) -> list[tuple[Review, ISnapshot]]:
        """Newest first by createdAt; reviews without createdAt are not returned."""
        q = self._client.collection(collection_path).order_by("createdAt", _NEWEST_FIRST)
        if start_after is not None:
            q = q.start_after(start_after)
        q = q.limit(page_size)
        return [(Review.from_document(s.id, s.to_dict()), s) async for s in q.stream()]

    async def list_recent(self, collection_path: str, limit: int) -> list[Review]:
        q = self._client.collection(collection_path).order_by("createdAt", _NEWEST_FIRST).limit(limit)
        return [Review.from_document(s.id, s.to_dict()) async for s in q.stream()]

    async def list_all(self, collection_path: str) -> list[Review]:
        return [
            Review.from_document(s.id, s.to_dict())
            async for s in self._client.collection(collection_path).stream()
        ]

    async def update(self, collection_path: str, review_id: str, data: dict[str, Any]) -> bool:
        """Update fields and touch updatedAt; False if the review is missing."""
        try:
            await self._client.collection(collection_path).document(review_id).update(
                {**data, "updatedAt": SERVER_TIMESTAMP}
            )
        except DocumentNotFoundError:
            return False
        return True

    async def set_response(self, collection_path: str, review_id: str, text: str) -> bool:
        return await self.update(
            collection_path,
            review_id,
            {"businessResponse": {"text": text, "createdAt": SERVER_TIMESTAMP}},
        )

    async def delete(self, collection_path: str, review_id: str) -> None:
        await self._client.collection(collection_path).document(review_id).delete()

    async def get_legacy_rating(self, rating_id: str) -> ISnapshot | None:
        return await self._client.collection(COLLECTION_RATINGS).document(rating_id).get()

    async def list_legacy_ratings(self, business_id: str) -> list[tuple[Review, ISnapshot]]:
        """Single equality filter only: the flat collection has no composite indexes."""
        q = self._client.collection(COLLECTION_RATINGS).where("businessId", "==", business_id)
        return [(Review.from_document(s.id, s.to_dict()), s) async for s in q.stream()]

    async def add_user_index(self, user_id: str, entry: ReviewIndexEntry) -> None:
        await self._client.collection(user_reviews_path(user_id)).document(entry.review_id).set(
            {
                "reviewId": entry.review_id,
                "type": entry.review_type.value,
                "businessId": entry.business_id,
                "itemId": entry.item_id,
                "createdAt": SERVER_TIMESTAMP,
            }
        )

    async def remove_user_index(self, user_id: str, review_id: str) -> None:
        await self._client.collection(user_reviews_path(user_id)).document(review_id).delete()

    async def list_user_index(self, user_id: str) -> list[ReviewIndexEntry]:
        entries: list[ReviewIndexEntry] = []
        async for snapshot in self._client.collection(user_reviews_path(user_id)).stream():
            data = snapshot.to_dict()
            try:
                review_type = ReviewType(data.get("type"))
            except ValueError:
                continue
            business_id = data.get("businessId")
            if not business_id:
                continue
            entries.append(
                ReviewIndexEntry(
                    review_id=data.get("reviewId") or snapshot.id,
                    review_type=review_type,
                    business_id=business_id,
                    item_id=data.get("itemId"),
                )
            )
        return entries

    async def reviewed_item_exists(self, user_id: str, entry_id: str) -> bool:
        doc = await self._client.collection(reviewed_items_path(user_id)).document(entry_id).get()
        return doc is not None

    async def put_reviewed_item(self, user_id: str, entry_id: str, data: dict[str, Any]) -> None:
        await self._client.collection(reviewed_items_path(user_id)).document(entry_id).set(
            {**data, "reviewedAt": SERVER_TIMESTAMP}
        )

"""Running rating counters (implements IRatingCounterStore).

Each scope is one RatingCounters/{scope} document holding `sum` and `count`.
Mutations use server-side increments, so concurrent reviewers never lose an
update the way a read-aggregate-write does.
"""

from __future__ import annotations

import logging

from udhyogunity.application.interfaces.store import IDocumentStore
from udhyogunity.domain.enums import ReviewType
from udhyogunity.infrastructure.firebase.collections import COLLECTION_RATING_COUNTERS
from udhyogunity.infrastructure.firebase.document import SERVER_TIMESTAMP, Increment

logger = logging.getLogger(__name__)


def counter_scope(review_type: ReviewType, business_id: str, item_id: str | None = None) -> str:
    """Counter document ID for a rated entity."""
    if review_type is ReviewType.BUSINESS:
        return f"{review_type.value}_{business_id}"
    return f"{review_type.value}_{business_id}_{item_id}"


class FirestoreRatingCounterStore:
    def __init__(self, client: IDocumentStore) -> None:
        self._coll = client.collection(COLLECTION_RATING_COUNTERS)

    async def _apply(self, scope: str, sum_delta: float, count_delta: int) -> None:
        await self._coll.document(scope).set(
            {
                "sum": Increment(sum_delta),
                "count": Increment(count_delta),
                "updatedAt": SERVER_TIMESTAMP,
            },
            merge=True,
        )

    async def record(self, scope: str, rating: float) -> None:
        await self._apply(scope, rating, 1)

    async def retract(self, scope: str, rating: float) -> None:
        await self._apply(scope, -rating, -1)

    async def adjust(self, scope: str, old_rating: float, new_rating: float) -> None:
        if old_rating != new_rating:
            await self._apply(scope, new_rating - old_rating, 0)

    async def exists(self, scope: str) -> bool:
        return await self._coll.document(scope).get() is not None

    async def read(self, scope: str) -> tuple[float, int]:
        doc = await self._coll.document(scope).get()
        if not doc:
            return 0.0, 0
        data = doc.to_dict()
        count = int(data.get("count") or 0)
        total = float(data.get("sum") or 0)
        if count <= 0:
            if count < 0:
                logger.warning("Rating counter %s went negative (count=%s)", scope, count)
            return 0.0, 0
        return total, count

    async def reseed(self, scope: str, total: float, count: int) -> None:
        await self._coll.document(scope).set(
            {"sum": total, "count": count, "updatedAt": SERVER_TIMESTAMP}
        )

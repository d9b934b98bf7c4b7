"""Reviewed-items ledger under Users/{uid}/ReviewedItems/{type}_{id}.

The client uses it to decide whether a customer may still review a purchased
or booked item. Existence of the document is the only signal.
"""

from __future__ import annotations

import logging

from udhyogunity.application.interfaces.repositories import IReviewRepository
from udhyogunity.domain.enums import ReviewType
from udhyogunity.domain.exceptions import ValidationException

logger = logging.getLogger(__name__)


def reviewed_item_id(entity_type: ReviewType | str, entity_id: str) -> str:
    kind = entity_type.value if isinstance(entity_type, ReviewType) else entity_type
    return f"{kind}_{entity_id}"


class ReviewedItemsService:
    def __init__(self, review_repo: IReviewRepository) -> None:
        self.review_repo = review_repo

    @staticmethod
    def _validate(user_id: str, entity_type: ReviewType | str, entity_id: str) -> None:
        for field, value in (("user_id", user_id), ("entity_type", entity_type), ("entity_id", entity_id)):
            if not value:
                raise ValidationException(f"{field} is required", field=field)

    async def has_user_reviewed(self, user_id: str, entity_type: ReviewType | str, entity_id: str) -> bool:
        """True when a ledger entry exists. Storage errors propagate."""
        self._validate(user_id, entity_type, entity_id)
        return await self.review_repo.reviewed_item_exists(user_id, reviewed_item_id(entity_type, entity_id))

    async def mark_as_reviewed(
        self,
        user_id: str,
        entity_type: ReviewType | str,
        entity_id: str,
        order_id: str | None = None,
        review_id: str | None = None,
    ) -> None:
        """Create or overwrite the ledger entry, linking the order or booking that earned it."""
        self._validate(user_id, entity_type, entity_id)
        kind = entity_type.value if isinstance(entity_type, ReviewType) else entity_type
        data = {"entityType": kind, "entityId": entity_id, "orderId": order_id}
        if review_id:
            data["reviewId"] = review_id
        await self.review_repo.put_reviewed_item(user_id, reviewed_item_id(entity_type, entity_id), data)
        logger.debug("Marked %s_%s reviewed by %s (order %s)", kind, entity_id, user_id, order_id)

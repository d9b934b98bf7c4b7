"""Review document stored under a composite review path."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from udhyogunity.domain.entities._fields import opt_str
from udhyogunity.domain.enums import ReviewStatus
from udhyogunity.shared.utils.datetime import parse_datetime
from udhyogunity.shared.utils.numbers import is_number


@dataclass(frozen=True)
class BusinessResponse:
    text: str
    created_at: datetime | None


@dataclass(frozen=True)
class Review:
    """Customer review. `rating` is None when the stored value is not a usable number."""

    id: str
    user_id: str | None
    user_name: str | None
    rating: float | None
    comment: str
    user_photo_url: str
    related_order_id: str | None
    business_response: BusinessResponse | None
    status: ReviewStatus
    created_at: datetime | None
    updated_at: datetime | None

    @property
    def counts_toward_aggregate(self) -> bool:
        """Stored rating was a usable non-zero number."""
        return self.rating is not None

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> "Review":
        raw_rating = data.get("rating")
        # Zero is treated as "no rating", as the web client did.
        rating = float(raw_rating) if is_number(raw_rating) and raw_rating else None
        try:
            status = ReviewStatus(data.get("status") or ReviewStatus.ACTIVE.value)
        except ValueError:
            status = ReviewStatus.ACTIVE
        response = data.get("businessResponse")
        business_response = None
        if isinstance(response, dict) and response.get("text"):
            business_response = BusinessResponse(
                text=str(response["text"]),
                created_at=parse_datetime(response.get("createdAt")),
            )
        return cls(
            id=doc_id,
            user_id=opt_str(data, "userId"),
            user_name=opt_str(data, "userName"),
            rating=rating,
            comment=data.get("comment") or "",
            user_photo_url=data.get("userPhotoURL") or "",
            related_order_id=opt_str(data, "orderOrBookingId", "relatedOrderId"),
            business_response=business_response,
            status=status,
            created_at=parse_datetime(data.get("createdAt")),
            updated_at=parse_datetime(data.get("updatedAt")),
        )

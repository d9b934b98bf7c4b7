"""Review API request/response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from udhyogunity.application.dtos.review import ReviewResult
from udhyogunity.domain.enums import ReviewStatus, ReviewType


class ReviewCreate(BaseModel):
    """Request body for creating a review.

    `rating` must be a whole number here; the 1..5 range is checked by the
    review service and surfaces as VALIDATION_ERROR (400).
    """

    type: ReviewType
    business_id: str = Field(..., min_length=1, description="Business email or internal id, as stored")
    item_id: str | None = Field(default=None, description="Product or service id (required for those types)")
    user_id: str = Field(..., min_length=1)
    user_name: str = Field(..., min_length=1)
    rating: int
    comment: str = ""
    user_photo_url: str | None = None
    related_order_id: str | None = Field(default=None, description="Order or booking that earned the review")


class ReviewUpdate(BaseModel):
    """Author edit. Unknown keys are passed through and rejected by the service."""

    model_config = ConfigDict(extra="allow")

    rating: int | None = None
    comment: str | None = None


class ReviewResponseCreate(BaseModel):
    text: str = Field(..., description="Business reply; blank text is rejected")


class BusinessResponseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    text: str
    created_at: datetime | None = None


class ReviewResponse(BaseModel):
    """A review and the entity it rates."""

    id: str
    type: ReviewType
    business_id: str
    item_id: str | None = None
    user_id: str | None = None
    user_name: str | None = None
    rating: float | None = None
    comment: str = ""
    user_photo_url: str = ""
    related_order_id: str | None = None
    status: ReviewStatus = ReviewStatus.ACTIVE
    business_response: BusinessResponseSchema | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_result(cls, result: ReviewResult) -> "ReviewResponse":
        review = result.review
        response = None
        if review.business_response is not None:
            response = BusinessResponseSchema.model_validate(review.business_response)
        return cls(
            id=review.id,
            type=result.review_type,
            business_id=result.business_id,
            item_id=result.item_id,
            user_id=review.user_id,
            user_name=review.user_name,
            rating=review.rating,
            comment=review.comment,
            user_photo_url=review.user_photo_url,
            related_order_id=review.related_order_id,
            status=review.status,
            business_response=response,
            created_at=review.created_at,
            updated_at=review.updated_at,
        )


class ReviewPageResponse(BaseModel):
    reviews: list[ReviewResponse] = Field(default_factory=list)
    next_cursor: str | None = Field(default=None, description="Pass as ?cursor= for the next page")


class ReviewStatsResponse(BaseModel):
    average_rating: float = 0.0
    review_count: int = 0
    rating_counts: dict[int, int] = Field(default_factory=dict)
    rating_percentages: dict[int, float] = Field(default_factory=dict)


class AverageRatingResponse(BaseModel):
    average_rating: float
    review_count: int


class ReviewedItemResponse(BaseModel):
    user_id: str
    entity_type: str
    entity_id: str
    reviewed: bool


class MarkReviewedRequest(BaseModel):
    order_id: str | None = Field(default=None, description="Order or booking that earned the review")
    review_id: str | None = None


def update_payload(body: ReviewUpdate) -> dict[str, Any]:
    """Fields the client actually sent, including unknown ones."""
    sent = {name: getattr(body, name) for name in ("rating", "comment") if name in body.model_fields_set}
    return {**sent, **(body.model_extra or {})}

"""Review API: thin routes delegating to ReviewService and RatingAggregationService.

{review_type} is business, product or service; product and service routes
take ?item_id=. Domain errors map to 400/404/503 in the exception handlers.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response

from udhyogunity.api.v1.dependencies import get_rating_aggregation_service, get_review_service
from udhyogunity.application.use_cases.reviews import RatingAggregationService, ReviewService
from udhyogunity.domain.enums import ReviewType
from udhyogunity.schemas.review import (
    AverageRatingResponse,
    ReviewCreate,
    ReviewPageResponse,
    ReviewResponse,
    ReviewResponseCreate,
    ReviewStatsResponse,
    ReviewUpdate,
    update_payload,
)

router = APIRouter()

ItemId = Annotated[str | None, Query(description="Product or service id")]


@router.post("", response_model=ReviewResponse, status_code=201)
async def create_review(
    body: ReviewCreate,
    service: Annotated[ReviewService, Depends(get_review_service)],
):
    """Create a review and update the rated entity's aggregate before returning."""
    result = await service.add_review(
        review_type=body.type,
        business_id=body.business_id,
        user_id=body.user_id,
        user_name=body.user_name,
        rating=body.rating,
        comment=body.comment,
        item_id=body.item_id,
        user_photo_url=body.user_photo_url,
        related_order_id=body.related_order_id,
    )
    return ReviewResponse.from_result(result)


@router.get("/{review_type}/{business_id}", response_model=ReviewPageResponse)
async def list_reviews(
    review_type: ReviewType,
    business_id: str,
    service: Annotated[ReviewService, Depends(get_review_service)],
    item_id: ItemId = None,
    page_size: Annotated[int | None, Query(ge=1)] = None,
    cursor: Annotated[str | None, Query(description="next_cursor from the previous page")] = None,
):
    """Newest reviews first, cursor-paginated."""
    page = await service.get_reviews(
        review_type, business_id, item_id=item_id, page_size=page_size, cursor=cursor
    )
    return ReviewPageResponse(
        reviews=[ReviewResponse.from_result(r) for r in page.reviews],
        next_cursor=page.next_cursor,
    )


@router.get("/{review_type}/{business_id}/stats", response_model=ReviewStatsResponse)
async def get_review_stats(
    review_type: ReviewType,
    business_id: str,
    aggregation: Annotated[RatingAggregationService, Depends(get_rating_aggregation_service)],
    item_id: ItemId = None,
):
    """Average, count and star histogram; zeros when unavailable."""
    stats = await aggregation.get_review_stats(review_type, business_id, item_id)
    return ReviewStatsResponse(
        average_rating=stats.average_rating,
        review_count=stats.review_count,
        rating_counts=stats.rating_counts,
        rating_percentages=stats.rating_percentages,
    )


@router.post("/{review_type}/{business_id}/recalculate", response_model=AverageRatingResponse)
async def recalculate_rating(
    review_type: ReviewType,
    business_id: str,
    aggregation: Annotated[RatingAggregationService, Depends(get_rating_aggregation_service)],
    item_id: ItemId = None,
):
    """Recompute the aggregate from every review and write it."""
    result = await aggregation.update_average_rating(review_type, business_id, item_id)
    return AverageRatingResponse(
        average_rating=result.average_rating, review_count=result.review_count
    )


@router.get("/{review_type}/{business_id}/{review_id}", response_model=ReviewResponse)
async def get_review(
    review_type: ReviewType,
    business_id: str,
    review_id: str,
    service: Annotated[ReviewService, Depends(get_review_service)],
    item_id: ItemId = None,
):
    result = await service.get_review_by_id(review_type, business_id, review_id, item_id=item_id)
    return ReviewResponse.from_result(result)


@router.patch("/{review_type}/{business_id}/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_type: ReviewType,
    business_id: str,
    review_id: str,
    body: ReviewUpdate,
    service: Annotated[ReviewService, Depends(get_review_service)],
    item_id: ItemId = None,
):
    """Author edit of rating and/or comment."""
    result = await service.update_review(
        review_type, business_id, review_id, update_payload(body), item_id=item_id
    )
    return ReviewResponse.from_result(result)


@router.delete("/{review_type}/{business_id}/{review_id}", status_code=204)
async def delete_review(
    review_type: ReviewType,
    business_id: str,
    review_id: str,
    service: Annotated[ReviewService, Depends(get_review_service)],
    item_id: ItemId = None,
):
    await service.delete_review(review_type, business_id, review_id, item_id=item_id)
    return Response(status_code=204)


@router.post("/{review_type}/{business_id}/{review_id}/response", response_model=ReviewResponse)
async def respond_to_review(
    review_type: ReviewType,
    business_id: str,
    review_id: str,
    body: ReviewResponseCreate,
    service: Annotated[ReviewService, Depends(get_review_service)],
    item_id: ItemId = None,
):
    """Business reply to a review."""
    result = await service.respond_to_review(
        review_type, business_id, review_id, body.text, item_id=item_id
    )
    return ReviewResponse.from_result(result)

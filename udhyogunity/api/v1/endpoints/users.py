"""User API: a customer's reviews and the reviewed-items ledger."""

from typing import Annotated

from fastapi import APIRouter, Body, Depends

from udhyogunity.api.v1.dependencies import get_review_service, get_reviewed_items_service
from udhyogunity.application.use_cases.reviews import ReviewedItemsService, ReviewService
from udhyogunity.schemas.review import MarkReviewedRequest, ReviewedItemResponse, ReviewResponse

router = APIRouter()


@router.get("/{user_id}/reviews", response_model=list[ReviewResponse])
async def get_user_reviews(
    user_id: str,
    service: Annotated[ReviewService, Depends(get_review_service)],
):
    """Reviews written by the user, newest first."""
    results = await service.get_user_reviews(user_id)
    return [ReviewResponse.from_result(r) for r in results]


@router.get("/{user_id}/reviewed-items/{entity_type}/{entity_id}", response_model=ReviewedItemResponse)
async def has_user_reviewed(
    user_id: str,
    entity_type: str,
    entity_id: str,
    service: Annotated[ReviewedItemsService, Depends(get_reviewed_items_service)],
):
    reviewed = await service.has_user_reviewed(user_id, entity_type, entity_id)
    return ReviewedItemResponse(
        user_id=user_id, entity_type=entity_type, entity_id=entity_id, reviewed=reviewed
    )


@router.put("/{user_id}/reviewed-items/{entity_type}/{entity_id}", response_model=ReviewedItemResponse)
async def mark_as_reviewed(
    user_id: str,
    entity_type: str,
    entity_id: str,
    service: Annotated[ReviewedItemsService, Depends(get_reviewed_items_service)],
    body: Annotated[MarkReviewedRequest | None, Body()] = None,
):
    """Record that the user reviewed the item (create or overwrite)."""
    body = body or MarkReviewedRequest()
    await service.mark_as_reviewed(
        user_id, entity_type, entity_id, order_id=body.order_id, review_id=body.review_id
    )
    return ReviewedItemResponse(
        user_id=user_id, entity_type=entity_type, entity_id=entity_id, reviewed=True
    )

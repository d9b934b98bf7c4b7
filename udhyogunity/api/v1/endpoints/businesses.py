"""Business API: identifier resolution and recent reviews."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from udhyogunity.api.v1.dependencies import get_identity_resolver, get_review_service
from udhyogunity.application.services.identity_resolver import BusinessIdentityResolver
from udhyogunity.application.use_cases.reviews import ReviewService
from udhyogunity.domain.exceptions import NotFoundException
from udhyogunity.schemas.dashboard import ResolvedBusinessResponse
from udhyogunity.schemas.review import ReviewResponse

router = APIRouter()


@router.get("/resolve", response_model=ResolvedBusinessResponse)
async def resolve_business(
    identifier: Annotated[str, Query(min_length=1)],
    resolver: Annotated[BusinessIdentityResolver, Depends(get_identity_resolver)],
):
    """Map an email, businessId or business name to the Businesses document key."""
    key = await resolver.resolve_business_key(identifier)
    if key is None:
        raise NotFoundException("business", identifier)
    return ResolvedBusinessResponse(identifier=identifier, business_key=key)


@router.get("/{business_id}/recent-reviews", response_model=list[ReviewResponse])
async def get_recent_reviews(
    business_id: str,
    service: Annotated[ReviewService, Depends(get_review_service)],
    limit: Annotated[int, Query(ge=1, le=50)] = 5,
):
    """Newest business reviews (business-level reviews only)."""
    results = await service.get_recent_business_reviews(business_id, limit=limit)
    return [ReviewResponse.from_result(r) for r in results]

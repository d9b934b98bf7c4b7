"""Dashboard API: business statistics across every historical storage location."""

from typing import Annotated

from fastapi import APIRouter, Depends

from udhyogunity.api.v1.dependencies import get_dashboard_stats_use_case
from udhyogunity.application.use_cases.dashboard import GetDashboardStatsUseCase
from udhyogunity.schemas.dashboard import DashboardStatsResponse

router = APIRouter()


@router.get("/{business_identifier}/stats", response_model=DashboardStatsResponse)
async def get_dashboard_stats(
    business_identifier: str,
    use_case: Annotated[GetDashboardStatsUseCase, Depends(get_dashboard_stats_use_case)],
):
    """Return service/product counts, pending reservations, payments and rating.

    Never fails on storage errors: unreadable sources count as zero.
    """
    stats = await use_case.fetch_dashboard_stats(business_identifier)
    return DashboardStatsResponse(
        service_count=stats.service_count,
        product_count=stats.product_count,
        pending_reservations=stats.pending_reservations,
        payments_received=stats.payments_received,
        average_rating=stats.average_rating,
        total_reviews=stats.total_reviews,
    )

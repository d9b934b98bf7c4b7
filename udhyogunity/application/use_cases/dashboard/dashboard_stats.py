"""Dashboard statistics use case: counts and sums across every historical storage shape."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from udhyogunity.application.dtos.dashboard import DashboardStats, RatingSummary
from udhyogunity.application.interfaces.store import IDocumentStore
from udhyogunity.application.services.identity_resolver import BusinessIdentityResolver
from udhyogunity.application.services.rating_calculator import round_rating
from udhyogunity.application.use_cases.dashboard.probes import (
    PAYMENT_PROBES,
    PENDING_RESERVATION_PROBES,
    PRODUCT_COUNT_PROBES,
    RATING_PROBES,
    SERVICE_COUNT_PROBES,
    ProbeContext,
    ProbeRunner,
)
from udhyogunity.shared.telemetry.tracing import traced
from udhyogunity.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class GetDashboardStatsUseCase:
    """Business dashboard counters.

    Every statistic resolves both identifier forms, then runs its probe table.
    Individual statistics may raise only if identity resolution itself breaks;
    fetch_dashboard_stats never raises.
    """

    def __init__(
        self,
        store: IDocumentStore,
        resolver: BusinessIdentityResolver,
        deduplicate: bool = False,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.resolver = resolver
        self.runner = ProbeRunner(store, deduplicate=deduplicate)
        self.clock = clock

    async def _context(self, identifier: str) -> ProbeContext:
        ids = await self.resolver.resolve_identifiers(identifier)
        return ProbeContext(raw=ids.raw, id=ids.business_id, email=ids.email, now=self.clock())

    async def get_services_count(self, identifier: str) -> int:
        ctx = await self._context(identifier)
        return (await self.runner.run(SERVICE_COUNT_PROBES, ctx)).count

    async def get_products_count(self, identifier: str) -> int:
        ctx = await self._context(identifier)
        return (await self.runner.run(PRODUCT_COUNT_PROBES, ctx)).count

    async def get_pending_reservations_count(self, identifier: str) -> int:
        """Pending or confirmed bookings dated now or later."""
        ctx = await self._context(identifier)
        return (await self.runner.run(PENDING_RESERVATION_PROBES, ctx)).count

    async def get_payments_received(self, identifier: str) -> float:
        """Completed bookings and settled orders, in rupees."""
        ctx = await self._context(identifier)
        return (await self.runner.run(PAYMENT_PROBES, ctx)).total

    async def get_rating_stats(self, identifier: str) -> RatingSummary:
        """Review-count-weighted rating across reviews, the business, its services and products."""
        ctx = await self._context(identifier)
        tally = await self.runner.run(RATING_PROBES, ctx)
        if not tally.count:
            return RatingSummary()
        return RatingSummary(average=round_rating(tally.total / tally.count), total=tally.count)

    @traced("dashboard.fetch_dashboard_stats")
    async def fetch_dashboard_stats(self, identifier: str | None) -> DashboardStats:
        """Run the five statistics concurrently; failures become zeros."""
        if not identifier:
            return DashboardStats()

        results = await asyncio.gather(
            self.get_services_count(identifier),
            self.get_products_count(identifier),
            self.get_pending_reservations_count(identifier),
            self.get_payments_received(identifier),
            self.get_rating_stats(identifier),
            return_exceptions=True,
        )
        names = ("services", "products", "pending_reservations", "payments", "ratings")
        for name, result in zip(names, results):
            if isinstance(result, BaseException):
                logger.error(
                    "Dashboard statistic %s failed for %r: %s", name, identifier, result,
                    exc_info=result,
                )
        services, products, pending, payments, ratings = (
            None if isinstance(r, BaseException) else r for r in results
        )
        ratings = ratings or RatingSummary()
        return DashboardStats(
            service_count=services or 0,
            product_count=products or 0,
            pending_reservations=pending or 0,
            payments_received=payments or 0.0,
            average_rating=ratings.average,
            total_reviews=ratings.total,
        )

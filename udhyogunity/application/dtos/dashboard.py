"""DTOs for the dashboard statistics use case."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RatingSummary:
    average: float = 0.0
    total: int = 0


@dataclass(frozen=True)
class DashboardStats:
    """Dashboard counters; every field defaults to zero."""

    service_count: int = 0
    product_count: int = 0
    pending_reservations: int = 0
    payments_received: float = 0.0
    average_rating: float = 0.0
    total_reviews: int = 0

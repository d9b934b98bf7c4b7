"""Dashboard statistics API schemas."""

from pydantic import BaseModel, Field


class DashboardStatsResponse(BaseModel):
    """Business dashboard counters; all zeros when nothing could be read."""

    service_count: int = 0
    product_count: int = 0
    pending_reservations: int = 0
    payments_received: float = Field(default=0.0, description="Rupees")
    average_rating: float = Field(default=0.0, description="One decimal, 0 when unrated")
    total_reviews: int = 0


class ResolvedBusinessResponse(BaseModel):
    identifier: str
    business_key: str

"""Typed document entities. All missing-field defaulting happens in from_document."""

from udhyogunity.domain.entities.business import Business
from udhyogunity.domain.entities.catalog import CatalogItem
from udhyogunity.domain.entities.commerce import Booking, Order
from udhyogunity.domain.entities.review import BusinessResponse, Review

__all__ = [
    "Booking",
    "Business",
    "BusinessResponse",
    "CatalogItem",
    "Order",
    "Review",
]

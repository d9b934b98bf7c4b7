"""Domain enumerations for the UdhyogUnity ratings service."""

from enum import Enum


class ReviewType(str, Enum):
    """What a review rates. Determines the composite review path."""

    BUSINESS = "business"
    PRODUCT = "product"
    SERVICE = "service"

    @property
    def requires_item(self) -> bool:
        """Product and service reviews are keyed by business and item."""
        return self is not ReviewType.BUSINESS

    @classmethod
    def values(cls) -> list[str]:
        return [t.value for t in cls]


class ReviewStatus(str, Enum):
    """Review moderation status. Only ACTIVE reviews are meant to count."""

    ACTIVE = "active"
    HIDDEN = "hidden"
    REPORTED = "reported"


class BusinessType(str, Enum):
    """Kind of business account."""

    PRODUCT = "Product"
    SERVICE = "Service"


class BookingStatus(str, Enum):
    """Service booking lifecycle status (as stored by the booking flow)."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ProductShelf(str, Enum):
    """Product subcollection under Products/{businessKey}; encodes stock status."""

    AVAILABLE = "Available"
    UNAVAILABLE = "Unavailable"

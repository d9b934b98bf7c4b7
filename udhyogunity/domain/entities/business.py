"""Business document (Businesses/{key}); key is historically the owner's email."""

from dataclasses import dataclass
from typing import Any

from udhyogunity.domain.entities._fields import opt_count, opt_number, opt_str
from udhyogunity.domain.enums import BusinessType


@dataclass(frozen=True)
class Business:
    """Business read-model with its denormalized aggregate rating."""

    key: str
    name: str | None
    email: str | None
    business_id: str | None
    business_type: BusinessType | None
    is_verified: bool
    rating: float | None
    review_count: int | None

    @classmethod
    def from_document(cls, key: str, data: dict[str, Any]) -> "Business":
        raw_type = data.get("businessType") or data.get("type")
        try:
            business_type = BusinessType(raw_type) if raw_type else None
        except ValueError:
            business_type = None
        return cls(
            key=key,
            name=opt_str(data, "businessName", "name"),
            email=opt_str(data, "email"),
            business_id=opt_str(data, "businessId"),
            business_type=business_type,
            is_verified=bool(data.get("isVerified", False)),
            rating=opt_number(data, "rating"),
            review_count=opt_count(data, "reviewCount"),
        )

"""Product and service documents (Products/{key}/{shelf}, Services/{key}/{shelf})."""

from dataclasses import dataclass
from typing import Any

from udhyogunity.domain.entities._fields import opt_count, opt_number, opt_str


@dataclass(frozen=True)
class CatalogItem:
    """A product or service offered by a business.

    `is_available` reflects inStock (products) or isActive (services);
    the shelf subcollection is the authoritative status.
    """

    id: str
    name: str | None
    price: float | None
    discounted_price: float | None
    category: str | None
    rating: float | None
    review_count: int | None
    is_available: bool

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> "CatalogItem":
        flag = data.get("inStock", data.get("isActive", True))
        return cls(
            id=doc_id,
            name=opt_str(data, "name", "productName", "serviceName"),
            price=opt_number(data, "price"),
            discounted_price=opt_number(data, "discountedPrice"),
            category=opt_str(data, "category"),
            rating=opt_number(data, "rating"),
            review_count=opt_count(data, "reviewCount"),
            is_available=bool(flag),
        )

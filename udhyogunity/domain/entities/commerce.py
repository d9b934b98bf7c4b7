"""Booking and order documents, read only as statistics sources."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from udhyogunity.domain.entities._fields import opt_str
from udhyogunity.shared.utils.datetime import parse_datetime
from udhyogunity.shared.utils.numbers import parse_amount

SETTLED_ORDER_STATUSES = frozenset({"completed", "delivered", "paid"})


@dataclass(frozen=True)
class Booking:
    id: str
    business_id: str | None
    business_email: str | None
    status: str | None
    date_time: datetime | None
    price: float

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> "Booking":
        return cls(
            id=doc_id,
            business_id=opt_str(data, "businessId"),
            business_email=opt_str(data, "businessEmail"),
            status=opt_str(data, "status"),
            date_time=parse_datetime(data.get("dateTime")),
            price=parse_amount(data.get("price")) if data.get("price") else 0.0,
        )


@dataclass(frozen=True)
class Order:
    id: str
    status: str | None
    total_amount: Any
    amount: Any
    price: Any

    @property
    def is_settled(self) -> bool:
        """No status, or a completed/delivered/paid status."""
        return not self.status or self.status in SETTLED_ORDER_STATUSES

    @property
    def value(self) -> float:
        """First truthy of totalAmount, amount, price; unparseable gives 0."""
        raw = self.total_amount or self.amount or self.price
        return parse_amount(raw) if raw else 0.0

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> "Order":
        return cls(
            id=doc_id,
            status=opt_str(data, "status"),
            total_amount=data.get("totalAmount"),
            amount=data.get("amount"),
            price=data.get("price"),
        )

"""Probe tables for dashboard statistics.

The same logical data was written to different collections over the
product's lifetime and never migrated. Each statistic is a fixed list of
probes over those historical locations; results add up across probes, so an
entity reachable by two paths is counted twice unless deduplication is on.

Templates use {raw} (identifier as passed), {id} (internal businessId) and
{email}. A failed probe contributes zero. A failed probe in a group skips
the rest of that group, except guarded probes, whose failures stay local.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from udhyogunity.application.interfaces.store import IDocumentStore
from udhyogunity.application.services.rating_calculator import RatingTally, rating_value
from udhyogunity.domain.entities import Booking, Order
from udhyogunity.domain.enums import BookingStatus
from udhyogunity.domain.exceptions import TransientStorageException
from udhyogunity.infrastructure.firebase.collections import (
    COLLECTION_BOOKINGS,
    COLLECTION_BUSINESSES,
    COLLECTION_BUSINESSES_LEGACY,
    COLLECTION_ORDERS,
    COLLECTION_ORDERS_LEGACY,
    COLLECTION_PRODUCTS,
    COLLECTION_PRODUCTS_FLAT,
    COLLECTION_REVIEWS,
    COLLECTION_SERVICES,
    COLLECTION_SERVICES_FLAT,
    SUBCOLLECTION_PRODUCT_ORDERS,
    SUBCOLLECTION_SERVICES_ACTIVE,
    SUBCOLLECTION_SERVICES_ACTIVE_LEGACY,
)
from udhyogunity.shared.utils.numbers import is_number

logger = logging.getLogger(__name__)

OPEN_BOOKING_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)


@dataclass(frozen=True)
class ProbeContext:
    raw: str
    id: str
    email: str
    now: datetime

    def render(self, template: str) -> str:
        return template.format(raw=self.raw, id=self.id, email=self.email)


Reducer = Callable[[dict[str, Any], ProbeContext], tuple[float, int]]
Condition = Callable[[ProbeContext], bool]


def always(ctx: ProbeContext) -> bool:
    return True


def when_distinct(ctx: ProbeContext) -> bool:
    """Email differs from the internal id."""
    return ctx.email != ctx.id


def when_email_differs_from_raw(ctx: ProbeContext) -> bool:
    return ctx.email != ctx.raw


def when_raw_is_email(ctx: ProbeContext) -> bool:
    return "@" in ctx.raw


# Reducers return (value, count) contributed by one document.


def count_document(data: dict[str, Any], ctx: ProbeContext) -> tuple[float, int]:
    return 0.0, 1


def count_upcoming_booking(data: dict[str, Any], ctx: ProbeContext) -> tuple[float, int]:
    booking = Booking.from_document("", data)
    if booking.date_time is not None and booking.date_time >= ctx.now:
        return 0.0, 1
    return 0.0, 0


def booking_price(data: dict[str, Any], ctx: ProbeContext) -> tuple[float, int]:
    return Booking.from_document("", data).price, 1


def order_amount(data: dict[str, Any], ctx: ProbeContext) -> tuple[float, int]:
    return Order.from_document("", data).value, 1


def settled_order_amount(data: dict[str, Any], ctx: ProbeContext) -> tuple[float, int]:
    order = Order.from_document("", data)
    if not order.is_settled:
        return 0.0, 0
    return order.value, 1


def review_rating(data: dict[str, Any], ctx: ProbeContext) -> tuple[float, int]:
    rating = rating_value(data.get("rating"))
    return (rating, 1) if rating is not None else (0.0, 0)


def _positive_count(data: dict[str, Any]) -> int | None:
    count = data.get("reviewCount")
    if is_number(count) and count > 0:
        return int(count)
    return None


def business_rating(data: dict[str, Any], ctx: ProbeContext) -> tuple[float, int]:
    """Business aggregate; a rating without reviewCount weighs one review."""
    rating = rating_value(data.get("rating"))
    if rating is None:
        return 0.0, 0
    count = _positive_count(data) or 1
    return rating * count, count


def rated_with_count(data: dict[str, Any], ctx: ProbeContext) -> tuple[float, int]:
    """Only entities carrying both rating and reviewCount."""
    rating = rating_value(data.get("rating"))
    count = _positive_count(data)
    if rating is None or count is None:
        return 0.0, 0
    return rating * count, count


def rated_or_single(data: dict[str, Any], ctx: ProbeContext) -> tuple[float, int]:
    rating = rating_value(data.get("rating"))
    if rating is None:
        return 0.0, 0
    count = _positive_count(data) or 1
    return rating * count, count


@dataclass(frozen=True)
class Probe:
    """One read against one historical location."""

    label: str
    path: str
    filters: tuple[tuple[str, str, Any], ...] = ()
    reducer: Reducer = count_document
    when: Condition = always
    document: bool = False
    fallback: str | None = None
    fallback_when: Condition = always
    group: str | None = None
    guarded: bool = False


def _eq(field: str, template: str) -> tuple[str, str, str]:
    return (field, "==", template)


SERVICE_COUNT_PROBES: tuple[Probe, ...] = (
    Probe("services by businessId", COLLECTION_SERVICES_FLAT, (_eq("businessId", "{raw}"),)),
    Probe("services by email", COLLECTION_SERVICES_FLAT, (_eq("email", "{email}"),)),
    Probe(
        "Services/Active",
        f"{COLLECTION_SERVICES}/{{raw}}/{SUBCOLLECTION_SERVICES_ACTIVE}",
        fallback=f"{COLLECTION_SERVICES}/{{email}}/{SUBCOLLECTION_SERVICES_ACTIVE}",
    ),
    Probe(
        "Services/ActiveServices",
        f"{COLLECTION_SERVICES}/{{raw}}/{SUBCOLLECTION_SERVICES_ACTIVE_LEGACY}",
        fallback=f"{COLLECTION_SERVICES}/{{email}}/{SUBCOLLECTION_SERVICES_ACTIVE_LEGACY}",
    ),
)

PRODUCT_COUNT_PROBES: tuple[Probe, ...] = (
    Probe("Products by businessId", COLLECTION_PRODUCTS, (_eq("businessId", "{id}"),)),
    Probe(
        "products by businessEmail",
        COLLECTION_PRODUCTS_FLAT,
        (_eq("businessEmail", "{email}"),),
        when=when_distinct,
    ),
    Probe(
        "Products/Available",
        f"{COLLECTION_PRODUCTS}/{{id}}/Available",
        fallback=f"{COLLECTION_PRODUCTS}/{{email}}/Available",
        fallback_when=when_distinct,
    ),
    Probe(
        "Products/Unavailable",
        f"{COLLECTION_PRODUCTS}/{{id}}/Unavailable",
        fallback=f"{COLLECTION_PRODUCTS}/{{email}}/Unavailable",
        fallback_when=when_distinct,
    ),
)

PENDING_RESERVATION_PROBES: tuple[Probe, ...] = (
    Probe(
        "open bookings by businessId",
        COLLECTION_BOOKINGS,
        (_eq("businessId", "{id}"), ("status", "in", OPEN_BOOKING_STATUSES)),
        reducer=count_upcoming_booking,
    ),
    Probe(
        "open bookings by businessEmail",
        COLLECTION_BOOKINGS,
        (_eq("businessEmail", "{email}"), ("status", "in", OPEN_BOOKING_STATUSES)),
        reducer=count_upcoming_booking,
        when=when_distinct,
    ),
)

PAYMENT_PROBES: tuple[Probe, ...] = (
    Probe(
        "completed bookings by businessId",
        COLLECTION_BOOKINGS,
        (_eq("businessId", "{id}"), ("status", "==", BookingStatus.COMPLETED.value)),
        reducer=booking_price,
        group="by_id",
    ),
    Probe(
        "Completed Orders by businessId",
        COLLECTION_ORDERS,
        (_eq("businessId", "{id}"), ("status", "==", "Completed")),
        reducer=order_amount,
        group="by_id",
    ),
    Probe(
        "completed bookings by businessEmail",
        COLLECTION_BOOKINGS,
        (_eq("businessEmail", "{email}"), ("status", "==", BookingStatus.COMPLETED.value)),
        reducer=booking_price,
        when=when_distinct,
        group="by_email",
    ),
    Probe(
        "completed orders by businessEmail",
        COLLECTION_ORDERS_LEGACY,
        (_eq("businessEmail", "{email}"), ("status", "==", "completed")),
        reducer=order_amount,
        when=when_distinct,
        group="by_email",
    ),
    Probe(
        "completed orders by email",
        COLLECTION_ORDERS_LEGACY,
        (_eq("email", "{email}"), ("status", "==", "completed")),
        reducer=order_amount,
        when=when_distinct,
        group="by_email",
        guarded=True,
    ),
    Probe(
        "settled Orders by businessEmail",
        COLLECTION_ORDERS,
        (_eq("businessEmail", "{email}"),),
        reducer=settled_order_amount,
        when=when_distinct,
        group="by_email",
        guarded=True,
    ),
    Probe(
        "settled Products/Orders",
        f"{COLLECTION_PRODUCTS}/{{email}}/{SUBCOLLECTION_PRODUCT_ORDERS}",
        reducer=settled_order_amount,
        when=when_distinct,
        group="by_email",
        guarded=True,
    ),
)

RATING_PROBES: tuple[Probe, ...] = (
    Probe("Reviews by businessId", COLLECTION_REVIEWS, (_eq("businessId", "{raw}"),), reducer=review_rating),
    # The email-keyed and plain Businesses reads hit the same document when raw
    # is an email; both are kept so totals match historical dashboards.
    Probe(
        "Businesses document (email key)",
        f"{COLLECTION_BUSINESSES}/{{raw}}",
        reducer=business_rating,
        when=when_raw_is_email,
        document=True,
        group="business_docs",
    ),
    Probe(
        "businesses document",
        f"{COLLECTION_BUSINESSES_LEGACY}/{{raw}}",
        reducer=business_rating,
        document=True,
        group="business_docs",
    ),
    Probe(
        "Businesses document",
        f"{COLLECTION_BUSINESSES}/{{raw}}",
        reducer=business_rating,
        document=True,
        group="business_docs",
    ),
    Probe(
        "rated services by businessId",
        COLLECTION_SERVICES_FLAT,
        (_eq("businessId", "{raw}"),),
        reducer=rated_with_count,
        group="services",
    ),
    Probe(
        "rated services by email",
        COLLECTION_SERVICES_FLAT,
        (_eq("email", "{email}"),),
        reducer=rated_with_count,
        when=when_email_differs_from_raw,
        group="services",
    ),
    Probe(
        "rated Services/Active",
        f"{COLLECTION_SERVICES}/{{raw}}/{SUBCOLLECTION_SERVICES_ACTIVE}",
        reducer=rated_or_single,
        fallback=f"{COLLECTION_SERVICES}/{{email}}/{SUBCOLLECTION_SERVICES_ACTIVE}",
        group="services",
        guarded=True,
    ),
    Probe(
        "rated Services/ActiveServices",
        f"{COLLECTION_SERVICES}/{{raw}}/{SUBCOLLECTION_SERVICES_ACTIVE_LEGACY}",
        reducer=rated_or_single,
        fallback=f"{COLLECTION_SERVICES}/{{email}}/{SUBCOLLECTION_SERVICES_ACTIVE_LEGACY}",
        group="services",
        guarded=True,
    ),
    Probe(
        "rated products by businessId",
        COLLECTION_PRODUCTS_FLAT,
        (_eq("businessId", "{raw}"),),
        reducer=rated_with_count,
        group="products",
    ),
    Probe(
        "rated Products/Available",
        f"{COLLECTION_PRODUCTS}/{{raw}}/Available",
        reducer=rated_with_count,
        group="products",
    ),
    Probe(
        "rated Products/Unavailable",
        f"{COLLECTION_PRODUCTS}/{{raw}}/Unavailable",
        reducer=rated_with_count,
        group="products",
    ),
)


class ProbeRunner:
    """Runs a probe table sequentially and accumulates a RatingTally."""

    def __init__(self, store: IDocumentStore, deduplicate: bool = False) -> None:
        self.store = store
        self.deduplicate = deduplicate

    async def _read(self, probe: Probe, path: str, ctx: ProbeContext) -> list[tuple[str, dict]]:
        if probe.document:
            snapshot = await self.store.document(path).get()
            return [(snapshot.path, snapshot.to_dict())] if snapshot else []
        collection = self.store.collection(path)
        if not probe.filters:
            return [(s.path, s.to_dict()) async for s in collection.stream()]
        query = None
        for field, op, value in probe.filters:
            if isinstance(value, str):
                value = ctx.render(value)
            query = (query or collection).where(field, op, value)
        return [(s.path, s.to_dict()) async for s in query.stream()]

    async def run(self, probes: tuple[Probe, ...], ctx: ProbeContext) -> RatingTally:
        tally = RatingTally()
        seen: set[str] = set()
        tripped: set[str] = set()
        for probe in probes:
            if probe.group in tripped or not probe.when(ctx):
                continue
            path = ctx.render(probe.path)
            try:
                rows = await self._read(probe, path, ctx)
            except TransientStorageException as e:
                logger.warning("Probe %r failed on %s: %s", probe.label, path, e.message)
                if probe.fallback and probe.fallback_when(ctx):
                    path = ctx.render(probe.fallback)
                    try:
                        rows = await self._read(probe, path, ctx)
                    except TransientStorageException as fallback_error:
                        logger.warning(
                            "Probe %r fallback failed on %s: %s",
                            probe.label,
                            path,
                            fallback_error.message,
                        )
                        continue
                else:
                    if probe.group and not probe.guarded:
                        tripped.add(probe.group)
                    continue
            for doc_path, data in rows:
                if self.deduplicate:
                    if doc_path in seen:
                        continue
                    seen.add(doc_path)
                value, count = probe.reducer(data, ctx)
                tally.total += value
                tally.count += count
            logger.debug("Probe %r on %s matched %d documents", probe.label, path, len(rows))
        return tally

"""Tests for document entities and field coercion helpers."""

from datetime import UTC, datetime

import pytest

from udhyogunity.application.use_cases.dashboard.probes import OPEN_BOOKING_STATUSES
from udhyogunity.domain.entities import Booking, Business, CatalogItem, Order, Review
from udhyogunity.domain.enums import BusinessType, ReviewStatus, ReviewType
from udhyogunity.infrastructure.firebase.collections import PRODUCT_SHELVES
from udhyogunity.shared.utils.datetime import parse_datetime
from udhyogunity.shared.utils.generators import DOCUMENT_ID_LENGTH, generate_document_id
from udhyogunity.shared.utils.numbers import is_number, parse_amount


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (120, 120.0),
        (" 120.5 INR", 120.5),
        ("1,000", 1.0),
        ("-15", -15.0),
        ("abc", 0.0),
        ("", 0.0),
        (None, 0.0),
        (True, 0.0),
        (float("nan"), 0.0),
    ],
)
def test_parse_amount(value, expected: float) -> None:
    """Loosely-typed amounts parse like the web client's parseFloat."""
    assert parse_amount(value) == expected


def test_is_number_excludes_booleans() -> None:
    assert is_number(3)
    assert is_number(3.5)
    assert not is_number(True)
    assert not is_number("3")


def test_parse_datetime_accepts_stored_shapes() -> None:
    expected = datetime(2025, 3, 15, 12, 0, tzinfo=UTC)
    assert parse_datetime("2025-03-15T12:00:00Z") == expected
    assert parse_datetime(expected.replace(tzinfo=None)) == expected
    assert parse_datetime(int(expected.timestamp() * 1000)) == expected
    assert parse_datetime("next tuesday") is None
    assert parse_datetime(None) is None


def test_generate_document_id() -> None:
    first, second = generate_document_id(), generate_document_id()
    assert len(first) == DOCUMENT_ID_LENGTH
    assert first != second


def test_review_type_requires_item() -> None:
    assert not ReviewType.BUSINESS.requires_item
    assert ReviewType.PRODUCT.requires_item
    assert ReviewType.SERVICE.requires_item
    assert ReviewType.values() == ["business", "product", "service"]


def test_stored_status_and_shelf_names() -> None:
    assert OPEN_BOOKING_STATUSES == ("pending", "confirmed")
    assert PRODUCT_SHELVES == ("Available", "Unavailable")


def test_review_from_document_defaults() -> None:
    review = Review.from_document("r1", {"rating": 0, "status": "bogus", "businessResponse": {"text": ""}})
    assert review.rating is None
    assert not review.counts_toward_aggregate
    assert review.status is ReviewStatus.ACTIVE
    assert review.business_response is None
    assert review.comment == ""


def test_review_from_document_reads_legacy_order_field() -> None:
    review = Review.from_document("r1", {"rating": 4, "relatedOrderId": "ord-9", "userPhotoURL": "http://x/p.png"})
    assert review.rating == 4.0
    assert review.related_order_id == "ord-9"
    assert review.user_photo_url == "http://x/p.png"


def test_business_from_document() -> None:
    business = Business.from_document(
        "owner@shop.com",
        {"businessName": "Chai Corner", "businessType": "Service", "rating": 4.2, "reviewCount": 5},
    )
    assert business.name == "Chai Corner"
    assert business.business_type is BusinessType.SERVICE
    assert (business.rating, business.review_count) == (4.2, 5)
    assert Business.from_document("x", {"businessType": "Retail"}).business_type is None


def test_catalog_item_from_document() -> None:
    item = CatalogItem.from_document("s1", {"serviceName": "Haircut", "isActive": False, "reviewCount": -2})
    assert item.name == "Haircut"
    assert not item.is_available
    assert item.review_count is None


def test_booking_price_parsing() -> None:
    booking = Booking.from_document("b1", {"price": "499", "dateTime": "2025-03-16T10:00:00Z"})
    assert booking.price == 499.0
    assert booking.date_time == datetime(2025, 3, 16, 10, 0, tzinfo=UTC)
    assert Booking.from_document("b2", {}).price == 0.0


@pytest.mark.parametrize(
    ("data", "settled", "value"),
    [
        ({"status": "completed", "totalAmount": 300, "amount": 10}, True, 300.0),
        ({"status": "delivered", "totalAmount": 0, "amount": "250"}, True, 250.0),
        ({"price": 75}, True, 75.0),
        ({"status": "pending", "amount": 99}, False, 99.0),
        ({"status": "paid"}, True, 0.0),
    ],
)
def test_order_settlement_and_value(data, settled: bool, value: float) -> None:
    order = Order.from_document("o1", data)
    assert order.is_settled is settled
    assert order.value == value

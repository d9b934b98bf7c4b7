"""Tests for REST value encoding, write sentinels and the in-memory document store."""

from datetime import UTC, datetime, timedelta

import pytest

from udhyogunity.infrastructure.exceptions import (
    DocumentExistsError,
    DocumentNotFoundError,
    TransientStorageError,
)
from udhyogunity.infrastructure.firebase._rest_encoding import (
    _parse_timestamp,
    decode_document,
    encode_document,
    encode_transform,
)
from udhyogunity.infrastructure.firebase.document import (
    INCREMENT,
    SERVER_TIMESTAMP,
    FieldTransform,
    quote_field_path,
    split_transforms,
)
from udhyogunity.infrastructure.firebase.memory_client import InMemoryFirestoreClient
from tests.factories import FIXED_NOW

# REST encoding


def test_encode_document_types() -> None:
    encoded = encode_document(
        {
            "name": "Tea",
            "price": 120,
            "rating": 4.5,
            "inStock": True,
            "notes": None,
            "tags": ["hot", 1],
            "createdAt": datetime(2025, 3, 15, 12, 0, tzinfo=UTC),
            "businessResponse": {"text": "Thanks"},
        }
    )["fields"]
    assert encoded["name"] == {"stringValue": "Tea"}
    assert encoded["price"] == {"integerValue": "120"}
    assert encoded["rating"] == {"doubleValue": 4.5}
    assert encoded["inStock"] == {"booleanValue": True}
    assert encoded["notes"] == {"nullValue": None}
    assert encoded["tags"]["arrayValue"]["values"][1] == {"integerValue": "1"}
    assert encoded["createdAt"] == {"timestampValue": "2025-03-15T12:00:00.000000Z"}
    assert encoded["businessResponse"]["mapValue"]["fields"]["text"] == {"stringValue": "Thanks"}


def test_encode_rejects_unsupported_types() -> None:
    with pytest.raises(TypeError):
        encode_document({"bad": object()})


def test_decode_document() -> None:
    document = {
        "name": "projects/p/databases/(default)/documents/Businesses/owner@shop.com",
        "fields": {
            "rating": {"doubleValue": 4.5},
            "reviewCount": {"integerValue": "12"},
            "isVerified": {"booleanValue": False},
            "createdAt": {"timestampValue": "2025-03-15T12:00:00Z"},
            "location": {"mapValue": {"fields": {"city": {"stringValue": "Pune"}}}},
            "empty": {"arrayValue": {}},
        },
    }
    data = decode_document(document)
    assert data["rating"] == 4.5
    assert data["reviewCount"] == 12
    assert data["isVerified"] is False
    assert data["createdAt"] == datetime(2025, 3, 15, 12, 0, tzinfo=UTC)
    assert data["location"] == {"city": "Pune"}
    assert data["empty"] == []
    assert decode_document(None) == {}


def test_parse_timestamp_truncates_nanoseconds() -> None:
    parsed = _parse_timestamp("2025-03-15T12:00:00.123456789Z")
    assert parsed.microsecond == 123456
    assert parsed.utcoffset() == timedelta(0)
    assert _parse_timestamp("2025-03-15T12:00:00.5Z").microsecond == 500000


def test_encode_transform() -> None:
    assert encode_transform(FieldTransform(("updatedAt",), "server_timestamp")) == {
        "fieldPath": "updatedAt",
        "setToServerValue": "REQUEST_TIME",
    }
    assert encode_transform(FieldTransform(("sum",), "increment", 4)) == {
        "fieldPath": "sum",
        "increment": {"integerValue": "4"},
    }
    with pytest.raises(ValueError):
        encode_transform(FieldTransform(("x",), "array_union"))


# Sentinels


def test_quote_field_path() -> None:
    assert quote_field_path(("businessResponse", "createdAt")) == "businessResponse.createdAt"
    assert quote_field_path(("owner@shop.com",)) == "`owner@shop.com`"


def test_split_transforms_separates_sentinels() -> None:
    plain, transforms = split_transforms(
        {"rating": 4, "updatedAt": SERVER_TIMESTAMP, "counter": {"sum": INCREMENT(2)}}
    )
    assert plain == {"rating": 4, "counter": {}}
    assert FieldTransform(("updatedAt",), "server_timestamp") in transforms
    assert FieldTransform(("counter", "sum"), "increment", 2) in transforms


# In-memory store


async def test_server_timestamp_and_increment_resolve() -> None:
    store = InMemoryFirestoreClient(clock=lambda: FIXED_NOW)
    doc = store.document("RatingCounters/business_x")
    await doc.set({"sum": INCREMENT(4), "count": INCREMENT(1), "updatedAt": SERVER_TIMESTAMP}, merge=True)
    await doc.set({"sum": INCREMENT(2.5), "count": INCREMENT(1)}, merge=True)
    data = store.peek("RatingCounters/business_x")
    assert data == {"sum": 6.5, "count": 2, "updatedAt": FIXED_NOW}


async def test_create_update_and_delete_semantics() -> None:
    store = InMemoryFirestoreClient()
    doc = store.document("Businesses/owner@shop.com")
    await doc.create({"businessName": "Shop"})
    with pytest.raises(DocumentExistsError):
        await doc.create({"businessName": "Again"})
    await doc.update({"rating": 4.0})
    assert store.peek("Businesses/owner@shop.com") == {"businessName": "Shop", "rating": 4.0}

    with pytest.raises(DocumentNotFoundError):
        await store.document("Businesses/missing").update({"rating": 1})

    await doc.delete()
    assert await doc.get() is None


async def test_set_without_merge_replaces_document() -> None:
    store = InMemoryFirestoreClient()
    store.put("Users/u1/ReviewedItems/product_p1", {"reviewId": "r1", "entityType": "product"})
    await store.document("Users/u1/ReviewedItems/product_p1").set({"entityType": "product"})
    assert store.peek("Users/u1/ReviewedItems/product_p1") == {"entityType": "product"}


async def test_query_filters_order_and_cursor() -> None:
    store = InMemoryFirestoreClient()
    for i, status in enumerate(["pending", "confirmed", "completed", "pending"]):
        store.put(
            f"bookings/b{i}",
            {"businessId": "shop1", "status": status, "createdAt": FIXED_NOW + timedelta(minutes=i)},
        )
    store.put("bookings/nodate", {"businessId": "shop1", "status": "pending"})
    store.put("bookings/b9/history/h1", {"businessId": "shop1", "status": "pending"})

    open_ids = [
        s.id
        async for s in store.collection("bookings")
        .where("businessId", "==", "shop1")
        .where("status", "in", ("pending", "confirmed"))
        .stream()
    ]
    assert open_ids == ["b0", "b1", "b3", "nodate"]

    ordered = [s async for s in store.collection("bookings").order_by("createdAt", "DESCENDING").stream()]
    assert [s.id for s in ordered] == ["b3", "b2", "b1", "b0"]

    after = [
        s.id
        async for s in store.collection("bookings")
        .order_by("createdAt", "DESCENDING")
        .start_after(ordered[1])
        .limit(1)
        .stream()
    ]
    assert after == ["b1"]


async def test_unsupported_operator_is_rejected() -> None:
    store = InMemoryFirestoreClient()
    with pytest.raises(ValueError):
        store.collection("bookings").where("price", ">", 10)


async def test_list_document_ids_includes_keys_without_documents() -> None:
    store = InMemoryFirestoreClient()
    store.put("Products/owner@shop.com/Available/p1", {"name": "Tea"})
    store.put("Products/other@shop.com/Unavailable/p2", {"name": "Cocoa"})
    assert await store.collection("Products").list_document_ids() == ["other@shop.com", "owner@shop.com"]


async def test_fail_on_injects_read_and_write_failures() -> None:
    store = InMemoryFirestoreClient()
    store.put("orders/o1", {"status": "completed"})
    store.fail_on("orders")
    with pytest.raises(TransientStorageError):
        await store.document("orders/o1").get()
    with pytest.raises(TransientStorageError):
        [s async for s in store.collection("orders").stream()]
    await store.document("orders/o2").set({"status": "completed"})
    assert store.peek("orders/o2") == {"status": "completed"}

    store.fail_on("orders", reads=False, writes=True)
    assert await store.document("orders/o1").get() is not None
    with pytest.raises(TransientStorageError):
        await store.document("orders/o3").set({})

    store.clear_failures()
    await store.document("orders/o3").set({})
    assert store.peek("orders/o3") == {}

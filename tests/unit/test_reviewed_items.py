"""Tests for the reviewed-items ledger."""

import pytest

from udhyogunity.application.use_cases.reviews import ReviewedItemsService
from udhyogunity.application.use_cases.reviews.reviewed_items import reviewed_item_id
from udhyogunity.domain.enums import ReviewType
from udhyogunity.domain.exceptions import TransientStorageException, ValidationException
from udhyogunity.infrastructure.firebase.memory_client import InMemoryFirestoreClient


def test_reviewed_item_id() -> None:
    assert reviewed_item_id(ReviewType.PRODUCT, "p1") == "product_p1"
    assert reviewed_item_id("service", "s1") == "service_s1"


async def test_mark_then_check(store: InMemoryFirestoreClient, reviewed_items: ReviewedItemsService) -> None:
    assert not await reviewed_items.has_user_reviewed("u1", "product", "p1")
    await reviewed_items.mark_as_reviewed("u1", ReviewType.PRODUCT, "p1", order_id="o1", review_id="r1")
    assert await reviewed_items.has_user_reviewed("u1", "product", "p1")
    assert not await reviewed_items.has_user_reviewed("u2", "product", "p1")

    entry = store.peek("Users/u1/ReviewedItems/product_p1")
    assert entry["entityType"] == "product"
    assert entry["entityId"] == "p1"
    assert entry["orderId"] == "o1"
    assert entry["reviewId"] == "r1"
    assert entry["reviewedAt"] is not None


async def test_mark_overwrites_existing_entry(
    store: InMemoryFirestoreClient, reviewed_items: ReviewedItemsService
) -> None:
    await reviewed_items.mark_as_reviewed("u1", "service", "s1", order_id="b1", review_id="r1")
    await reviewed_items.mark_as_reviewed("u1", "service", "s1", order_id="b2")
    entry = store.peek("Users/u1/ReviewedItems/service_s1")
    assert entry["orderId"] == "b2"
    assert "reviewId" not in entry


async def test_read_failure_propagates(
    store: InMemoryFirestoreClient, reviewed_items: ReviewedItemsService
) -> None:
    store.put("Users/u1/ReviewedItems/product_p1", {"entityType": "product"})
    store.fail_on("Users/u1")
    with pytest.raises(TransientStorageException):
        await reviewed_items.has_user_reviewed("u1", "product", "p1")


@pytest.mark.parametrize(("user_id", "entity_type", "entity_id"), [("", "product", "p1"), ("u1", "", "p1"), ("u1", "product", "")])
async def test_blank_arguments_are_rejected(
    reviewed_items: ReviewedItemsService, user_id: str, entity_type: str, entity_id: str
) -> None:
    with pytest.raises(ValidationException):
        await reviewed_items.has_user_reviewed(user_id, entity_type, entity_id)
    with pytest.raises(ValidationException):
        await reviewed_items.mark_as_reviewed(user_id, entity_type, entity_id)

"""Seed helpers for the in-memory document store."""

from datetime import UTC, datetime

from udhyogunity.infrastructure.firebase.memory_client import InMemoryFirestoreClient

FIXED_NOW = datetime(2025, 3, 15, 12, 0, tzinfo=UTC)


def seed_business(store: InMemoryFirestoreClient, key: str, **fields) -> None:
    """Businesses/{key} with an email defaulting to the key."""
    data = {"businessName": f"Shop {key}", "email": key, "businessType": "Product"}
    data.update(fields)
    store.put(f"Businesses/{key}", data)


def seed_product(
    store: InMemoryFirestoreClient,
    business_key: str,
    product_id: str,
    shelf: str = "Available",
    **fields,
) -> None:
    data = {"name": f"Product {product_id}", "price": 100, "inStock": shelf == "Available"}
    data.update(fields)
    store.put(f"Products/{business_key}/{shelf}/{product_id}", data)


def seed_service(
    store: InMemoryFirestoreClient,
    business_key: str,
    service_id: str,
    shelf: str = "ActiveServices",
    **fields,
) -> None:
    data = {"name": f"Service {service_id}", "price": 500, "isActive": True}
    data.update(fields)
    store.put(f"Services/{business_key}/{shelf}/{service_id}", data)


def docs_under(store: InMemoryFirestoreClient, prefix: str) -> list[str]:
    """Paths of every stored document under prefix."""
    return sorted(path for path in store._docs if path.startswith(prefix))

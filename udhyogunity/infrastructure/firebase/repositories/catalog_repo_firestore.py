"""Firestore-backed product/service repository (implements ICatalogRepository)."""

from __future__ import annotations

from udhyogunity.application.interfaces.store import IDocumentStore
from udhyogunity.domain.entities import CatalogItem
from udhyogunity.infrastructure.exceptions import DocumentNotFoundError
from udhyogunity.infrastructure.firebase.collections import (
    COLLECTION_PRODUCTS,
    PRODUCT_SHELVES,
    product_shelf_path,
    service_shelf_path,
)


class FirestoreCatalogRepository:
    """Products live under Products/{key}/{Available|Unavailable}; services under Services/{key}/{shelf}."""

    def __init__(self, client: IDocumentStore) -> None:
        self._client = client

    async def find_product(self, business_key: str, item_id: str) -> tuple[str, CatalogItem] | None:
        """Return (shelf, product), checking Available before Unavailable."""
        for shelf in PRODUCT_SHELVES:
            doc = await self._client.collection(product_shelf_path(business_key, shelf)).document(item_id).get()
            if doc:
                return shelf, CatalogItem.from_document(doc.id, doc.to_dict())
        return None

    async def list_product_owner_keys(self) -> list[str]:
        """Business keys under Products; most have no document of their own, only shelves."""
        return await self._client.collection(COLLECTION_PRODUCTS).list_document_ids()

    async def list_products(self, business_key: str) -> list[CatalogItem]:
        items: list[CatalogItem] = []
        for shelf in PRODUCT_SHELVES:
            async for snapshot in self._client.collection(product_shelf_path(business_key, shelf)).stream():
                items.append(CatalogItem.from_document(snapshot.id, snapshot.to_dict()))
        return items

    async def update_product_rating(
        self, business_key: str, shelf: str, item_id: str, rating: float, review_count: int
    ) -> bool:
        return await self._update_rating(product_shelf_path(business_key, shelf), item_id, rating, review_count)

    async def update_service_rating(
        self, business_key: str, shelf: str, item_id: str, rating: float, review_count: int
    ) -> bool:
        return await self._update_rating(service_shelf_path(business_key, shelf), item_id, rating, review_count)

    async def _update_rating(self, collection_path: str, item_id: str, rating: float, review_count: int) -> bool:
        try:
            await self._client.collection(collection_path).document(item_id).update(
                {"rating": rating, "reviewCount": review_count}
            )
        except DocumentNotFoundError:
            return False
        return True

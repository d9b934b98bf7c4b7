"""Firestore-backed business repository (implements IBusinessRepository)."""

from __future__ import annotations

from udhyogunity.application.interfaces.store import IDocumentStore
from udhyogunity.domain.entities import Business
from udhyogunity.infrastructure.exceptions import DocumentNotFoundError
from udhyogunity.infrastructure.firebase.collections import COLLECTION_BUSINESSES


class FirestoreBusinessRepository:
    """Business documents keyed by the canonical business key (usually the owner email)."""

    def __init__(self, client: IDocumentStore) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_BUSINESSES)

    async def get(self, key: str) -> Business | None:
        """Return business by key."""
        doc = await self._coll.document(key).get()
        if not doc:
            return None
        return Business.from_document(doc.id, doc.to_dict())

    async def find_keys_by_field(self, field: str, value: str) -> list[str]:
        """Return keys of businesses whose field equals value (server-side where query)."""
        return [snapshot.id async for snapshot in self._coll.where(field, "==", value).stream()]

    async def find_by_email(self, email: str) -> list[Business]:
        return [
            Business.from_document(snapshot.id, snapshot.to_dict())
            async for snapshot in self._coll.where("email", "==", email).stream()
        ]

    async def list_all(self) -> list[Business]:
        """Return every business document (full collection read)."""
        return [
            Business.from_document(snapshot.id, snapshot.to_dict())
            async for snapshot in self._coll.stream()
        ]

    async def update_rating(self, key: str, rating: float, review_count: int) -> bool:
        """Overwrite the aggregate; return False if the document does not exist."""
        try:
            await self._coll.document(key).update(
                {"rating": rating, "reviewCount": review_count}
            )
        except DocumentNotFoundError:
            return False
        return True

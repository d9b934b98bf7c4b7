"""Document store port.

Structural type matching both the Firestore REST client and the in-memory
store; the dashboard probe tables address arbitrary historical collections
through it.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any, Protocol


class ISnapshot(Protocol):
    id: str
    path: str

    def get(self, field: str, default: Any = None) -> Any: ...

    def to_dict(self) -> dict: ...


class IDocumentReference(Protocol):
    id: str
    path: str

    async def get(self) -> ISnapshot | None: ...

    async def set(self, data: dict[str, Any], merge: bool = False) -> None: ...

    async def update(self, data: dict[str, Any]) -> None: ...

    async def delete(self) -> None: ...


class IQuery(Protocol):
    def where(self, field: str, op: str, value: Any) -> IQuery: ...

    def order_by(self, field: str, direction: str = "ASCENDING") -> IQuery: ...

    def limit(self, n: int) -> IQuery: ...

    def start_after(self, snapshot: ISnapshot) -> IQuery: ...

    def stream(self) -> AsyncIterator[ISnapshot]: ...


class ICollectionReference(Protocol):
    id: str
    path: str

    def document(self, document_id: str | None = None) -> IDocumentReference: ...

    async def add(self, data: dict[str, Any]) -> IDocumentReference: ...

    def where(self, field: str, op: str, value: Any) -> IQuery: ...

    def order_by(self, field: str, direction: str = "ASCENDING") -> IQuery: ...

    def limit(self, n: int) -> IQuery: ...

    def stream(self) -> AsyncIterator[ISnapshot]: ...

    async def list_document_ids(self) -> list[str]: ...


class IDocumentStore(Protocol):
    def collection(self, path: str) -> ICollectionReference: ...

    def document(self, path: str) -> IDocumentReference: ...

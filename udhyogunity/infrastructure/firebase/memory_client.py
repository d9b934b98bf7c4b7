"""Process-local document store with the same surface as FirestoreRESTClient.

Selected with DATABASE_BACKEND=memory; the test suite runs against it.
Documents are stored by full path ("Reviews/Businesses/owner@x.com/r1").
Query semantics follow Firestore: documents missing an order_by field are
excluded, ties order by document path, start_after compares cursor values.
"""

from __future__ import annotations

import copy
import functools
from collections.abc import AsyncIterator, Callable
from datetime import datetime
from typing import Any

from udhyogunity.infrastructure.exceptions import (
    DocumentExistsError,
    DocumentNotFoundError,
    TransientStorageError,
)
from udhyogunity.infrastructure.firebase.document import (
    SERVER_TIMESTAMP,
    DocumentSnapshot,
    Increment,
)
from udhyogunity.shared.utils.datetime import utc_now
from udhyogunity.shared.utils.generators import generate_document_id

_MISSING = object()


def _resolve(value: Any, existing: Any, now: datetime) -> Any:
    if value is SERVER_TIMESTAMP:
        return now
    if isinstance(value, Increment):
        base = existing if isinstance(existing, (int, float)) and not isinstance(existing, bool) else 0
        return base + value.value
    if isinstance(value, dict):
        current = existing if isinstance(existing, dict) else {}
        return {k: _resolve(v, current.get(k, _MISSING), now) for k, v in value.items()}
    return copy.deepcopy(value)


def _type_rank(value: Any) -> int:
    # Firestore cross-type ordering: null < bool < number < timestamp < string < bytes < ...
    if value is None:
        return 0
    if isinstance(value, bool):
        return 1
    if isinstance(value, (int, float)):
        return 2
    if isinstance(value, datetime):
        return 3
    if isinstance(value, str):
        return 4
    if isinstance(value, bytes):
        return 5
    return 6


def _compare_values(a: Any, b: Any) -> int:
    ra, rb = _type_rank(a), _type_rank(b)
    if ra != rb:
        return -1 if ra < rb else 1
    if ra == 6:
        a, b = repr(a), repr(b)
    if a == b:
        return 0
    return -1 if a < b else 1


class InMemoryDocumentReference:
    def __init__(self, client: InMemoryFirestoreClient, path: str):
        self._client = client
        self.path = path
        self.id = path.split("/")[-1]

    async def get(self) -> DocumentSnapshot | None:
        self._client._check(self.path, write=False)
        data = self._client._docs.get(self.path)
        if data is None:
            return None
        return DocumentSnapshot(self.id, copy.deepcopy(data), self.path)

    async def set(self, data: dict[str, Any], merge: bool = False) -> None:
        self._client._check(self.path, write=True)
        existing = self._client._docs.get(self.path) or {}
        resolved = _resolve(data, existing if merge else {}, self._client.now())
        if merge:
            merged = copy.deepcopy(existing)
            merged.update(resolved)
            resolved = merged
        self._client._docs[self.path] = resolved

    async def create(self, data: dict[str, Any]) -> None:
        self._client._check(self.path, write=True)
        if self.path in self._client._docs:
            raise DocumentExistsError(self.path)
        self._client._docs[self.path] = _resolve(data, {}, self._client.now())

    async def update(self, data: dict[str, Any]) -> None:
        self._client._check(self.path, write=True)
        existing = self._client._docs.get(self.path)
        if existing is None:
            raise DocumentNotFoundError(self.path)
        updated = copy.deepcopy(existing)
        updated.update(_resolve(data, existing, self._client.now()))
        self._client._docs[self.path] = updated

    async def delete(self) -> None:
        self._client._check(self.path, write=True)
        self._client._docs.pop(self.path, None)


class InMemoryQuery:
    def __init__(self, client: InMemoryFirestoreClient, path: str):
        self._client = client
        self._path = path
        self._filters: list[tuple[str, str, Any]] = []
        self._orders: list[tuple[str, bool]] = []
        self._limit: int | None = None
        self._start_after: DocumentSnapshot | None = None

    def where(self, field: str, op: str, value: Any) -> InMemoryQuery:
        if op not in ("==", "in"):
            raise ValueError(f"Unsupported query operator: {op!r}")
        self._filters.append((field, op, value))
        return self

    def order_by(self, field: str, direction: str = "ASCENDING") -> InMemoryQuery:
        self._orders.append((field, direction.upper().startswith("DESC")))
        return self

    def limit(self, n: int) -> InMemoryQuery:
        self._limit = n
        return self

    def start_after(self, snapshot: DocumentSnapshot) -> InMemoryQuery:
        self._start_after = snapshot
        return self

    def _matches(self, data: dict[str, Any]) -> bool:
        for field, op, value in self._filters:
            if field not in data:
                return False
            if op == "==" and data[field] != value:
                return False
            if op == "in" and data[field] not in value:
                return False
        return all(field in data for field, _ in self._orders)

    def _compare(self, a: tuple[str, dict], b: tuple[str, dict]) -> int:
        for field, descending in self._orders:
            result = _compare_values(a[1].get(field), b[1].get(field))
            if result:
                return -result if descending else result
        last_descending = self._orders[-1][1] if self._orders else False
        result = _compare_values(a[0], b[0])
        return -result if last_descending else result

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        self._client._check(self._path, write=False)
        rows = [
            (path, data)
            for path, data in self._client._children(self._path)
            if self._matches(data)
        ]
        key = functools.cmp_to_key(self._compare)
        rows.sort(key=key)
        if self._start_after is not None:
            cursor = (self._start_after.path, self._start_after.to_dict())
            rows = [row for row in rows if self._compare(row, cursor) > 0]
        if self._limit:
            rows = rows[: self._limit]
        for path, data in rows:
            yield DocumentSnapshot(path.split("/")[-1], copy.deepcopy(data), path)


class InMemoryCollectionReference:
    def __init__(self, client: InMemoryFirestoreClient, path: str):
        self._client = client
        self.path = path.strip("/")
        self.id = self.path.split("/")[-1]

    def document(self, document_id: str | None = None) -> InMemoryDocumentReference:
        doc_id = document_id or generate_document_id()
        return InMemoryDocumentReference(self._client, f"{self.path}/{doc_id}")

    async def add(self, data: dict[str, Any]) -> InMemoryDocumentReference:
        ref = self.document()
        await ref.create(data)
        return ref

    def where(self, field: str, op: str, value: Any) -> InMemoryQuery:
        return InMemoryQuery(self._client, self.path).where(field, op, value)

    def order_by(self, field: str, direction: str = "ASCENDING") -> InMemoryQuery:
        return InMemoryQuery(self._client, self.path).order_by(field, direction)

    def limit(self, n: int) -> InMemoryQuery:
        return InMemoryQuery(self._client, self.path).limit(n)

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        async for snapshot in InMemoryQuery(self._client, self.path).stream():
            yield snapshot

    async def list_document_ids(self) -> list[str]:
        self._client._check(self.path, write=False)
        prefix = f"{self.path}/"
        ids: set[str] = set()
        for path in self._client._docs:
            if path.startswith(prefix):
                ids.add(path[len(prefix):].split("/")[0])
        return sorted(ids)


class InMemoryFirestoreClient:
    """Dict-backed document store.

    fail_on(path) makes reads (and optionally writes) under that path raise
    TransientStorageError, standing in for missing indexes or permission errors.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._docs: dict[str, dict[str, Any]] = {}
        self._failures: dict[str, tuple[bool, bool]] = {}
        self._clock = clock or utc_now

    def now(self) -> datetime:
        return self._clock()

    def collection(self, path: str) -> InMemoryCollectionReference:
        return InMemoryCollectionReference(self, path)

    def document(self, path: str) -> InMemoryDocumentReference:
        return InMemoryDocumentReference(self, path.strip("/"))

    async def aclose(self) -> None:
        return None

    def put(self, path: str, data: dict[str, Any]) -> None:
        """Seed a document synchronously (sentinels are resolved)."""
        self._docs[path.strip("/")] = _resolve(data, {}, self.now())

    def peek(self, path: str) -> dict[str, Any] | None:
        """Synchronous read without failure injection."""
        data = self._docs.get(path.strip("/"))
        return copy.deepcopy(data) if data is not None else None

    def fail_on(self, path: str, *, reads: bool = True, writes: bool = False) -> None:
        self._failures[path.strip("/")] = (reads, writes)

    def clear_failures(self) -> None:
        self._failures.clear()

    def _check(self, path: str, *, write: bool) -> None:
        for prefix, (reads, writes) in self._failures.items():
            if path == prefix or path.startswith(f"{prefix}/"):
                if (write and writes) or (not write and reads):
                    raise TransientStorageError(
                        f"Simulated storage failure on {path}", path
                    )

    def _children(self, collection_path: str) -> list[tuple[str, dict[str, Any]]]:
        depth = collection_path.count("/") + 1
        prefix = f"{collection_path}/"
        return [
            (path, data)
            for path, data in self._docs.items()
            if path.startswith(prefix) and path.count("/") == depth
        ]

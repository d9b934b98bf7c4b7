"""Thin Firestore REST API client (no firebase-admin).

Uses google-auth for service account tokens and Firestore REST v1.
Keeps the deployment bundle small (avoids grpcio / firebase-admin).
All HTTP calls use httpx.AsyncClient so they do not block the event loop.

Writes go through documents:commit so that SERVER_TIMESTAMP and Increment
sentinels become updateTransforms applied atomically by the server.
Collection paths may be nested ("Products/owner@x.com/Available").
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

from udhyogunity.infrastructure.exceptions import (
    DocumentExistsError,
    DocumentNotFoundError,
    TransientStorageError,
)
from udhyogunity.infrastructure.firebase._rest_encoding import (
    _encode_value,
    decode_document,
    encode_document,
    encode_transform,
)
from udhyogunity.infrastructure.firebase.document import (
    DocumentSnapshot,
    quote_field_path,
    split_transforms,
)
from udhyogunity.shared.utils.generators import generate_document_id

logger = logging.getLogger(__name__)

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
_BASE = "https://firestore.googleapis.com/v1"
_LIST_PAGE_SIZE = 300


def _get_credentials(key_dict: dict):
    """Return google.oauth2.service_account.Credentials for Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=[_FIRESTORE_SCOPE]
    )


def _get_access_token(credentials) -> str:
    from google.auth.exceptions import GoogleAuthError
    from google.auth.transport.requests import Request

    if not credentials.valid:
        try:
            credentials.refresh(Request())
        except GoogleAuthError as e:
            raise TransientStorageError(f"Firestore token refresh failed: {e}") from e
    return credentials.token


async def _request_async(
    client: httpx.AsyncClient,
    url: str,
    method: str = "GET",
    body: dict | None = None,
    access_token: str | None = None,
    params: dict | list | None = None,
    path: str | None = None,
) -> Any:
    """Perform async HTTP request to Firestore REST API. 404 returns None.

    409 raises DocumentExistsError; any other non-2xx status or transport
    failure raises TransientStorageError.
    """
    headers = {"Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    try:
        if method == "GET":
            resp = await client.get(url, headers=headers, params=params)
        elif method == "PATCH":
            resp = await client.patch(url, headers=headers, json=body, params=params)
        elif method == "POST":
            resp = await client.post(url, headers=headers, json=body, params=params)
        elif method == "DELETE":
            resp = await client.delete(url, headers=headers, params=params)
        else:
            raise ValueError(f"Unsupported method: {method!r}")
    except httpx.HTTPError as e:
        raise TransientStorageError(f"Firestore request failed: {e}", path) from e
    if resp.status_code == 404:
        return None
    if resp.status_code == 409:
        raise DocumentExistsError(path or url)
    if resp.status_code not in (200, 204):
        logger.debug("Firestore %s %s -> %s: %s", method, url, resp.status_code, resp.text[:500])
        raise TransientStorageError(
            f"Firestore returned HTTP {resp.status_code}",
            path,
            status_code=resp.status_code,
        )
    if method == "DELETE":
        return {}
    raw = resp.content
    return json.loads(raw.decode()) if raw else {}


class DocumentReference:
    """Reference to a single document; matches firestore API style."""

    def __init__(self, client: FirestoreRESTClient, path: str):
        self._client = client
        self.path = path
        self.id = path.split("/")[-1]

    @property
    def _name(self) -> str:
        return f"{self._client._prefix}/{self.path}"

    async def _commit(
        self,
        data: dict[str, Any],
        *,
        mask: list[str] | None = None,
        exists: bool | None = None,
    ) -> None:
        plain, transforms = split_transforms(data)
        write: dict[str, Any] = {"update": {"name": self._name, **encode_document(plain)}}
        if mask is not None:
            write["updateMask"] = {"fieldPaths": mask}
        if transforms:
            write["updateTransforms"] = [encode_transform(t) for t in transforms]
        if exists is not None:
            write["currentDocument"] = {"exists": exists}
        out = await _request_async(
            self._client._http,
            f"{_BASE}/{self._client._prefix}:commit",
            method="POST",
            body={"writes": [write]},
            access_token=await self._client.get_token(),
            path=self.path,
        )
        if out is None:
            raise DocumentNotFoundError(self.path)

    async def set(self, data: dict[str, Any], merge: bool = False) -> None:
        """Create or overwrite the document; with merge only the given fields change."""
        mask = None
        if merge:
            plain, _ = split_transforms(data)
            mask = [quote_field_path((k,)) for k in plain]
        await self._commit(data, mask=mask)

    async def create(self, data: dict[str, Any]) -> None:
        """Create the document; DocumentExistsError if it already exists."""
        await self._commit(data, exists=False)

    async def update(self, data: dict[str, Any]) -> None:
        """Update top-level fields of an existing document.

        Raises DocumentNotFoundError when the document does not exist.
        """
        plain, _ = split_transforms(data)
        await self._commit(
            data,
            mask=[quote_field_path((k,)) for k in plain],
            exists=True,
        )

    async def get(self) -> DocumentSnapshot | None:
        """Fetch the document; returns None if not found."""
        out = await _request_async(
            self._client._http,
            f"{_BASE}/{self._name}",
            access_token=await self._client.get_token(),
            path=self.path,
        )
        if not out:
            return None
        return DocumentSnapshot(self.id, decode_document(out), self.path)

    async def delete(self) -> None:
        """Delete the document. Idempotent if document is already missing (404)."""
        await _request_async(
            self._client._http,
            f"{_BASE}/{self._name}",
            method="DELETE",
            access_token=await self._client.get_token(),
            path=self.path,
        )


_OP_MAP: dict[str, str] = {
    "==": "EQUAL",
    "!=": "NOT_EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "in": "IN",
    "not-in": "NOT_IN",
    "array_contains": "ARRAY_CONTAINS",
    "array-contains": "ARRAY_CONTAINS",
}

_DIRECTIONS = {"ASCENDING": "ASCENDING", "DESCENDING": "DESCENDING", "asc": "ASCENDING", "desc": "DESCENDING"}


class _Query:
    """Fluent query builder for a collection; runs via runQuery on the parent document."""

    def __init__(self, client: FirestoreRESTClient, path: str):
        self._client = client
        self._path = path
        self._filters: list[tuple[str, str, Any]] = []
        self._orders: list[tuple[str, str]] = []
        self._limit: int | None = None
        self._start_after: DocumentSnapshot | None = None

    def where(self, field: str, op: str, value: Any) -> _Query:
        if op not in _OP_MAP:
            raise ValueError(f"Unsupported query operator: {op!r}")
        self._filters.append((field, _OP_MAP[op], value))
        return self

    def order_by(self, field: str, direction: str = "ASCENDING") -> _Query:
        self._orders.append((field, _DIRECTIONS.get(direction, direction)))
        return self

    def limit(self, n: int) -> _Query:
        self._limit = n
        return self

    def start_after(self, snapshot: DocumentSnapshot) -> _Query:
        self._start_after = snapshot
        return self

    def _field_filter(self, field: str, op: str, value: Any) -> dict:
        return {
            "fieldFilter": {
                "field": {"fieldPath": field},
                "op": op,
                "value": _encode_value(value),
            }
        }

    def _structured_query(self) -> dict[str, Any]:
        collection_id = self._path.split("/")[-1]
        structured: dict[str, Any] = {"from": [{"collectionId": collection_id}]}
        if len(self._filters) == 1:
            structured["where"] = self._field_filter(*self._filters[0])
        elif self._filters:
            structured["where"] = {
                "compositeFilter": {
                    "op": "AND",
                    "filters": [self._field_filter(*f) for f in self._filters],
                }
            }
        orders = list(self._orders)
        if self._start_after is not None and orders:
            # Cursor values must cover every order field, ending with __name__.
            orders.append(("__name__", orders[-1][1]))
        if orders:
            structured["orderBy"] = [
                {"field": {"fieldPath": f}, "direction": d} for f, d in orders
            ]
        if self._start_after is not None:
            values = [
                _encode_value(self._start_after.get(f)) for f, _ in self._orders
            ]
            values.append(
                {"referenceValue": f"{self._client._prefix}/{self._start_after.path}"}
            )
            if not self._orders:
                structured["orderBy"] = [
                    {"field": {"fieldPath": "__name__"}, "direction": "ASCENDING"}
                ]
            structured["startAt"] = {"values": values, "before": False}
        if self._limit:
            structured["limit"] = self._limit
        return structured

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """Execute the query and yield document snapshots."""
        parent = self._path.rsplit("/", 1)[0] if "/" in self._path else ""
        parent_name = f"{self._client._prefix}/{parent}" if parent else self._client._prefix
        resp = await _request_async(
            self._client._http,
            f"{_BASE}/{parent_name}:runQuery",
            method="POST",
            body={"structuredQuery": self._structured_query()},
            access_token=await self._client.get_token(),
            path=self._path,
        )
        items = resp if isinstance(resp, list) else ([resp] if resp else [])
        for item in items:
            if "document" not in item:
                continue
            yield self._client._snapshot(item["document"])


class CollectionReference:
    """Reference to a (possibly nested) collection; matches firestore API style."""

    def __init__(self, client: FirestoreRESTClient, path: str):
        self._client = client
        self.path = path.strip("/")
        self.id = self.path.split("/")[-1]

    def document(self, document_id: str | None = None) -> DocumentReference:
        doc_id = document_id or generate_document_id()
        return DocumentReference(self._client, f"{self.path}/{doc_id}")

    async def add(self, data: dict[str, Any]) -> DocumentReference:
        """Create a document with a generated ID and return its reference."""
        ref = self.document()
        await ref.create(data)
        return ref

    def where(self, field: str, op: str, value: Any) -> _Query:
        """Start a query with a filter. Chain .where(), .order_by(), .limit(), then .stream()."""
        return _Query(self._client, self.path).where(field, op, value)

    def order_by(self, field: str, direction: str = "ASCENDING") -> _Query:
        return _Query(self._client, self.path).order_by(field, direction)

    def limit(self, n: int) -> _Query:
        return _Query(self._client, self.path).limit(n)

    async def _list_pages(self, show_missing: bool = False) -> AsyncIterator[dict]:
        url = f"{_BASE}/{self._client._prefix}/{self.path}"
        page_token: str | None = None
        while True:
            params: dict[str, Any] = {"pageSize": _LIST_PAGE_SIZE}
            if page_token:
                params["pageToken"] = page_token
            if show_missing:
                params["showMissing"] = "true"
            out = await _request_async(
                self._client._http,
                url,
                params=params,
                access_token=await self._client.get_token(),
                path=self.path,
            )
            if not out:
                return
            for doc in out.get("documents", []):
                yield doc
            page_token = out.get("nextPageToken")
            if not page_token:
                return

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """List every document in the collection (shallow, all pages)."""
        async for doc in self._list_pages():
            yield self._client._snapshot(doc)

    async def list_document_ids(self) -> list[str]:
        """IDs of documents in the collection, including parents that only hold subcollections."""
        ids: list[str] = []
        async for doc in self._list_pages(show_missing=True):
            name = doc.get("name", "")
            if name:
                ids.append(name.split("/")[-1])
        return ids


class FirestoreRESTClient:
    """Lightweight Firestore client using REST API (no firebase-admin)."""

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self._prefix = f"projects/{project_id}/databases/(default)/documents"
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str | None:
        """Return a valid access token; refreshes in thread pool to avoid blocking."""
        if self._credentials is None:
            return None
        return await asyncio.to_thread(_get_access_token, self._credentials)

    def collection(self, path: str) -> CollectionReference:
        return CollectionReference(self, path)

    def document(self, path: str) -> DocumentReference:
        return DocumentReference(self, path.strip("/"))

    def _snapshot(self, doc: dict) -> DocumentSnapshot:
        name = doc.get("name", "")
        path = name[len(self._prefix) + 1:] if name.startswith(self._prefix) else name
        return DocumentSnapshot(path.split("/")[-1], decode_document(doc), path)

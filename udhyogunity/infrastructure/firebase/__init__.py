"""Firestore integration (REST client and in-memory store)."""

from udhyogunity.infrastructure.firebase.client import (
    close_firebase,
    get_firestore_client,
    init_firebase,
)
from udhyogunity.infrastructure.firebase.document import (
    INCREMENT,
    SERVER_TIMESTAMP,
    DocumentSnapshot,
    Increment,
)

__all__ = [
    "INCREMENT",
    "SERVER_TIMESTAMP",
    "DocumentSnapshot",
    "Increment",
    "close_firebase",
    "get_firestore_client",
    "init_firebase",
]

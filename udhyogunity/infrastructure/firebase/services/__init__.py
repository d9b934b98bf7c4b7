"""Firestore-backed application services."""

from udhyogunity.infrastructure.firebase.services.rating_counter_firestore import (
    FirestoreRatingCounterStore,
    counter_scope,
)

__all__ = ["FirestoreRatingCounterStore", "counter_scope"]

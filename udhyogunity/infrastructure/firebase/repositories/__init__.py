"""Firestore-backed repository implementations."""

from udhyogunity.infrastructure.firebase.repositories.business_repo_firestore import (
    FirestoreBusinessRepository,
)
from udhyogunity.infrastructure.firebase.repositories.catalog_repo_firestore import (
    FirestoreCatalogRepository,
)
from udhyogunity.infrastructure.firebase.repositories.review_repo_firestore import (
    FirestoreReviewRepository,
)

__all__ = [
    "FirestoreBusinessRepository",
    "FirestoreCatalogRepository",
    "FirestoreReviewRepository",
]

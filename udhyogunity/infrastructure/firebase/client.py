"""Document store client (Firestore REST, or in-memory for local runs and tests).

Initialized at app startup. The Firestore backend uses either
FIREBASE_SERVICE_ACCOUNT_KEY (JSON string) or FIREBASE_SERVICE_ACCOUNT_PATH
(file path) and talks to the Firestore REST API with google-auth, which keeps
the deployment free of firebase-admin and grpcio.
"""

import json
import logging
from pathlib import Path

from udhyogunity.core.config import get_settings
from udhyogunity.infrastructure.firebase._rest_client import (
    FirestoreRESTClient,
    _get_credentials,
)
from udhyogunity.infrastructure.firebase.memory_client import InMemoryFirestoreClient

logger = logging.getLogger(__name__)

DocumentStore = FirestoreRESTClient | InMemoryFirestoreClient

_firestore_client: DocumentStore | None = None


def _load_key_dict():
    """Return service account dict from env key or file path."""
    settings = get_settings()
    key_json = settings.firebase_service_account_key.get_secret_value() if settings.firebase_service_account_key else None
    if key_json:
        try:
            return json.loads(key_json)
        except json.JSONDecodeError as e:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON") from e
    path = settings.firebase_service_account_path
    if path:
        resolved = Path(path).expanduser().resolve() if not Path(path).is_absolute() else Path(path)
        if not resolved.is_file():
            logger.warning(
                "FIREBASE_SERVICE_ACCOUNT_PATH set but file not found: %s (resolved: %s)",
                path,
                resolved,
            )
            return None
        with open(resolved, encoding="utf-8") as f:
            return json.load(f)
    return None


def init_firebase() -> bool:
    """Initialize the document store client.

    With DATABASE_BACKEND=memory an empty in-memory store is created.
    Otherwise the Firestore REST client is built from the service account.
    Idempotent if already initialized. On invalid credentials or any
    initialization error, logs the exception and returns False so the app
    can start (requests needing storage then fail with 503).

    Returns:
        True if a client is available, False if disabled or on error.
    """
    global _firestore_client
    if _firestore_client is not None:
        return True
    settings = get_settings()
    if settings.database_backend == "memory":
        _firestore_client = InMemoryFirestoreClient()
        logger.info("Using in-memory document store")
        return True
    try:
        key_dict = _load_key_dict()
        if not key_dict:
            return False

        project_id = key_dict.get("project_id")
        if not project_id:
            logger.error("Firebase service account JSON missing 'project_id'")
            return False

        cred = _get_credentials(key_dict)
        _firestore_client = FirestoreRESTClient(
            project_id, cred, timeout=settings.firestore_timeout_seconds
        )
        logger.info("Firestore REST client initialized for project %s", project_id)
        return True
    except Exception:
        logger.exception("Firebase initialization failed")
        return False


def get_firestore_client() -> DocumentStore | None:
    """Return the document store client, or None if not configured.

    Both backends expose the same async API:
    - await db.collection(path).document(id).get() -> DocumentSnapshot | None
    - await db.collection(path).document(id).set(data) / .update(data) / .delete()
    - await db.collection(path).add(data)
    - async for doc in db.collection(path).where(f, op, v).order_by(f).stream()
    """
    return _firestore_client


def set_firestore_client(client: DocumentStore | None) -> None:
    """Replace the process-wide client (tests inject a seeded in-memory store)."""
    global _firestore_client
    _firestore_client = client


async def close_firebase() -> None:
    """Close the client's HTTP connection pool. Call from app shutdown."""
    global _firestore_client
    if _firestore_client is not None:
        await _firestore_client.aclose()
        _firestore_client = None
        logger.info("Document store client closed")

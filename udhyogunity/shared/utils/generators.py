"""Document ID generator (CUID2, Firestore auto-id length)."""

from cuid2 import Cuid

# Firestore auto-generated ids are 20 characters long.
DOCUMENT_ID_LENGTH = 20

_document_id_generator = Cuid(length=DOCUMENT_ID_LENGTH)


def generate_document_id() -> str:
    """Generate a collision-resistant id for a new document.

    Returns:
        A new 20-character CUID string.
    """
    result = _document_id_generator.generate()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from Cuid.generate, got {type(result).__name__}"
        )
    return result

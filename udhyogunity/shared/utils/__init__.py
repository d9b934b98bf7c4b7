"""Small stateless utilities (datetime handling, id generation, numeric coercion)."""

from udhyogunity.shared.utils.datetime import ensure_utc, parse_datetime, utc_now
from udhyogunity.shared.utils.generators import generate_document_id
from udhyogunity.shared.utils.numbers import parse_amount

__all__ = [
    "ensure_utc",
    "generate_document_id",
    "parse_amount",
    "parse_datetime",
    "utc_now",
]

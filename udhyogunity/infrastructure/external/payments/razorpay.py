"""Server side of the Razorpay checkout callback.

Checkout resolves with one of: a settlement
{razorpay_payment_id, razorpay_order_id, razorpay_signature}, a dismissal
(modal closed) or a failure {error}. Settlements are trusted only after the
signature checks out.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from udhyogunity.domain.exceptions import PaymentVerificationException

logger = logging.getLogger(__name__)


def verify_payment_signature(order_id: str, payment_id: str, signature: str, key_secret: str) -> bool:
    """HMAC-SHA256 of "{order_id}|{payment_id}" keyed with the account secret."""
    if not (order_id and payment_id and signature and key_secret):
        return False
    expected = hmac.new(
        key_secret.encode("utf-8"),
        f"{order_id}|{payment_id}".encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return hmac.compare_digest(expected, signature)


class PaymentResult(str, Enum):
    SUCCESS = "success"
    DISMISSED = "dismissed"
    FAILED = "failed"


@dataclass(frozen=True)
class PaymentOutcome:
    result: PaymentResult
    payment_id: str | None = None
    order_id: str | None = None
    signature: str | None = None
    error: dict[str, Any] | None = None

    @classmethod
    def from_callback(cls, payload: dict[str, Any] | None) -> PaymentOutcome:
        """Classify a checkout callback payload."""
        payload = payload or {}
        if payload.get("razorpay_payment_id"):
            return cls(
                result=PaymentResult.SUCCESS,
                payment_id=payload["razorpay_payment_id"],
                order_id=payload.get("razorpay_order_id"),
                signature=payload.get("razorpay_signature"),
            )
        if payload.get("error"):
            error = payload["error"]
            return cls(
                result=PaymentResult.FAILED,
                error=error if isinstance(error, dict) else {"description": str(error)},
            )
        return cls(result=PaymentResult.DISMISSED)

    def verify(self, key_secret: str) -> None:
        """Raise PaymentVerificationException unless this is a correctly signed settlement."""
        if self.result is not PaymentResult.SUCCESS:
            raise PaymentVerificationException(f"Payment not settled: {self.result.value}")
        if not verify_payment_signature(self.order_id or "", self.payment_id or "", self.signature or "", key_secret):
            logger.warning("Rejected Razorpay settlement %s: bad signature", self.payment_id)
            raise PaymentVerificationException()

"""Razorpay settlement callback handling."""

from udhyogunity.infrastructure.external.payments.razorpay import (
    PaymentOutcome,
    PaymentResult,
    verify_payment_signature,
)

__all__ = ["PaymentOutcome", "PaymentResult", "verify_payment_signature"]

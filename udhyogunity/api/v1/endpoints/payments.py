"""Payments API: verifies Razorpay checkout callbacks."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, HTTPException

from udhyogunity.api.v1.dependencies import SettingsDep
from udhyogunity.infrastructure.external.payments import PaymentOutcome, PaymentResult
from udhyogunity.schemas.payment import PaymentVerificationResponse

router = APIRouter()


@router.post("/verify", response_model=PaymentVerificationResponse)
async def verify_payment(
    payload: Annotated[dict[str, Any], Body()],
    settings: SettingsDep,
):
    """Classify the callback; settlements must carry a valid signature (else 400)."""
    if settings.razorpay_key_secret is None:
        raise HTTPException(status_code=503, detail="Payments not configured (set RAZORPAY_KEY_SECRET)")
    outcome = PaymentOutcome.from_callback(payload)
    if outcome.result is not PaymentResult.SUCCESS:
        return PaymentVerificationResponse(result=outcome.result.value, verified=False)
    outcome.verify(settings.razorpay_key_secret.get_secret_value())
    return PaymentVerificationResponse(
        result=outcome.result.value,
        verified=True,
        payment_id=outcome.payment_id,
        order_id=outcome.order_id,
    )

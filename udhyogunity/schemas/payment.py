"""Payment callback API schemas."""

from pydantic import BaseModel


class PaymentVerificationResponse(BaseModel):
    result: str
    verified: bool
    payment_id: str | None = None
    order_id: str | None = None

"""Pydantic schemas for Razorpay order creation and verification."""

from typing import Optional

from pydantic import AliasChoices, Field

from caarvo.domain.schemas.common import CamelModel


class CreateOrderRequest(CamelModel):
    booking_id: int
    amount: Optional[float] = Field(default=None, gt=0)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)


class VerifyPaymentRequest(CamelModel):
    """Accepts both our camelCase names and the field names Razorpay Checkout returns."""

    order_id: str = Field(validation_alias=AliasChoices("orderId", "order_id", "razorpay_order_id"))
    payment_id: str = Field(validation_alias=AliasChoices("paymentId", "payment_id", "razorpay_payment_id"))
    signature: str = Field(validation_alias=AliasChoices("signature", "razorpay_signature"))
    booking_id: int = Field(validation_alias=AliasChoices("bookingId", "booking_id"))


class GatewayOrder(CamelModel):
    id: str
    amount: int
    currency: str
    receipt: str


class PaymentStatusRead(CamelModel):
    booking_id: int
    payment_status: str
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None

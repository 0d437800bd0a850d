"""Payment service: Razorpay order creation and checkout signature verification."""

import hashlib
import hmac
from typing import Any, Dict, Optional

import structlog

from caarvo.config import get_settings
from caarvo.core.exceptions import (
    EntityNotFoundException,
    PaymentVerificationException,
    ServiceUnavailableException,
    ValidationException,
)
from caarvo.domain.models.booking import Booking, PaymentStatus
from caarvo.domain.models.user import User, UserRole
from caarvo.domain.repositories.booking_repository import BookingRepository
from caarvo.domain.schemas.payment import CreateOrderRequest, VerifyPaymentRequest

settings = get_settings()
logger = structlog.get_logger(__name__)


def compute_signature(order_id: str, payment_id: str, secret: str) -> str:
    message = f"{order_id}|{payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def signature_matches(order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    expected = compute_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected.encode(), signature.encode())


def _get_payable(repo: BookingRepository, booking_id: int, user: User) -> Booking:
    booking = repo.get_by_id(booking_id)
    if not booking:
        raise EntityNotFoundException("Booking not found")
    if user.role != UserRole.ADMIN.value and booking.customer_id != user.id:
        raise EntityNotFoundException("Booking not found")
    return booking


async def create_order(
    repo: BookingRepository, gateway, user: User, data: CreateOrderRequest
) -> Dict[str, Any]:
    booking = _get_payable(repo, data.booking_id, user)
    if booking.payment_status == PaymentStatus.COMPLETED.value:
        raise ValidationException("Booking is already paid")

    amount = booking.price if data.amount is None else data.amount
    if round(amount * 100) != round(booking.price * 100):
        raise ValidationException("Amount does not match the booking price")
    if not gateway.is_configured:
        raise ServiceUnavailableException("Payment gateway is not configured")

    currency = (data.currency or settings.PAYMENT_CURRENCY).upper()
    order = await gateway.create_order(
        amount=int(round(amount * 100)),
        currency=currency,
        receipt=f"booking_{booking.id}",
        notes={"bookingId": str(booking.id)},
    )

    booking.razorpay_order_id = order["id"]
    booking.payment_status = PaymentStatus.PENDING.value
    repo.save(booking)
    logger.info("Payment order created", booking_id=booking.id, order_id=order["id"])

    return {
        "order": {
            "id": order["id"],
            "amount": order["amount"],
            "currency": order["currency"],
            "receipt": order.get("receipt", f"booking_{booking.id}"),
        },
        "keyId": gateway.key_id,
    }


def verify_payment(
    repo: BookingRepository, user: User, data: VerifyPaymentRequest, secret: Optional[str] = None
) -> Booking:
    secret = settings.RAZORPAY_KEY_SECRET if secret is None else secret
    if not secret:
        raise ServiceUnavailableException("Payment gateway is not configured")

    booking = _get_payable(repo, data.booking_id, user)
    if booking.payment_status == PaymentStatus.COMPLETED.value:
        raise ValidationException("Booking is already paid")
    if booking.razorpay_order_id and booking.razorpay_order_id != data.order_id:
        raise ValidationException("Order does not belong to this booking")

    if not signature_matches(data.order_id, data.payment_id, data.signature, secret):
        booking.payment_status = PaymentStatus.FAILED.value
        repo.save(booking)
        logger.warning("Payment verification failed", booking_id=booking.id, order_id=data.order_id)
        raise PaymentVerificationException()

    booking.payment_status = PaymentStatus.COMPLETED.value
    booking.razorpay_order_id = data.order_id
    booking.razorpay_payment_id = data.payment_id
    booking.razorpay_signature = data.signature
    booking = repo.save(booking)
    logger.info("Payment verified", booking_id=booking.id, payment_id=data.payment_id)
    return booking


def get_payment_status(repo: BookingRepository, booking_id: int, user: User) -> Dict[str, Any]:
    booking = repo.get_by_id(booking_id)
    visible = booking is not None and (
        user.role == UserRole.ADMIN.value
        or booking.customer_id == user.id
        or booking.worker_id == user.id
    )
    if not visible:
        raise EntityNotFoundException("Booking not found")
    return {
        "booking_id": booking.id,
        "payment_status": booking.payment_status,
        "razorpay_order_id": booking.razorpay_order_id,
        "razorpay_payment_id": booking.razorpay_payment_id,
    }

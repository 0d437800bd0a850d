"""Payment API routes: Razorpay order creation, verification and status."""

from fastapi import APIRouter, Depends

from caarvo.application.services import payment_service
from caarvo.domain.models.user import User
from caarvo.domain.repositories.booking_repository import BookingRepository
from caarvo.domain.schemas.booking import BookingRead
from caarvo.domain.schemas.common import envelope
from caarvo.domain.schemas.payment import CreateOrderRequest, PaymentStatusRead, VerifyPaymentRequest
from caarvo.interfaces.api.deps import get_current_user
from caarvo.interfaces.deps import get_booking_repository, get_payment_gateway

router = APIRouter(prefix="/api/payments", tags=["Payments"])


@router.post("/create-order")
async def create_order(
    body: CreateOrderRequest,
    repo: BookingRepository = Depends(get_booking_repository),
    gateway=Depends(get_payment_gateway),
    user: User = Depends(get_current_user),
):
    data = await payment_service.create_order(repo, gateway, user, body)
    return envelope(data, "Order created successfully")


@router.post("/verify")
@router.post("/verify-payment", include_in_schema=False)
def verify_payment(
    body: VerifyPaymentRequest,
    repo: BookingRepository = Depends(get_booking_repository),
    user: User = Depends(get_current_user),
):
    """Check the checkout signature and mark the booking paid."""
    booking = payment_service.verify_payment(repo, user, body)
    return envelope(BookingRead.model_validate(booking), "Payment verified successfully")


@router.get("/status/{booking_id}")
def payment_status(
    booking_id: int,
    repo: BookingRepository = Depends(get_booking_repository),
    user: User = Depends(get_current_user),
):
    status = payment_service.get_payment_status(repo, booking_id, user)
    return envelope(PaymentStatusRead.model_validate(status))

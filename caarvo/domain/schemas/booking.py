"""Pydantic schemas for bookings."""

from typing import Optional

from pydantic import Field

from caarvo.domain.lifecycle import BookingStatus
from caarvo.domain.models.booking import ServiceType
from caarvo.domain.schemas.address import Coordinates
from caarvo.domain.schemas.common import CamelModel, UtcDatetime
from caarvo.domain.schemas.user import UserSummary
from caarvo.domain.schemas.vehicle import VehicleSummary


class Location(CamelModel):
    address: str = Field(min_length=1, max_length=300)
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=100)
    zip_code: str = Field(min_length=1, max_length=20)
    coordinates: Optional[Coordinates] = None


class BookingCreate(CamelModel):
    vehicle_id: int
    service_type: ServiceType
    scheduled_date: UtcDatetime
    scheduled_time: str = Field(min_length=1, max_length=50)
    location: Location
    notes: Optional[str] = Field(default=None, max_length=500)
    price: float = Field(ge=0)


class BookingStatusUpdate(CamelModel):
    status: BookingStatus
    notes: Optional[str] = Field(default=None, max_length=500)


class AdminBookingStatusUpdate(BookingStatusUpdate):
    reason: Optional[str] = Field(default=None, max_length=200)


class CancelRequest(CamelModel):
    reason: Optional[str] = Field(default=None, max_length=200)


class ReviewRequest(CamelModel):
    rating: int = Field(ge=1, le=5)
    review: Optional[str] = Field(default=None, max_length=1000)


class AssignRequest(CamelModel):
    worker_id: int


class BookingNotes(CamelModel):
    customer: Optional[str] = None
    worker: Optional[str] = None


class BookingRead(CamelModel):
    id: int
    customer_id: int
    vehicle_id: int
    worker_id: Optional[int] = None
    service_type: str
    scheduled_date: UtcDatetime
    scheduled_time: str
    location: Location
    status: str
    price: float
    payment_status: str
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    notes: BookingNotes
    rating: Optional[int] = None
    review: Optional[str] = None
    completed_at: Optional[UtcDatetime] = None
    cancelled_at: Optional[UtcDatetime] = None
    cancelled_by: Optional[str] = None
    cancellation_reason: Optional[str] = None
    is_past: bool
    can_be_cancelled: bool
    customer: Optional[UserSummary] = None
    worker: Optional[UserSummary] = None
    vehicle: Optional[VehicleSummary] = None
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None

"""Booking API routes for customers and workers."""

from typing import Optional

from fastapi import APIRouter, Depends, status

from caarvo.application.services import booking_service
from caarvo.domain.models.user import User, UserRole
from caarvo.domain.repositories.booking_repository import BookingRepository
from caarvo.domain.repositories.vehicle_repository import VehicleRepository
from caarvo.domain.schemas.booking import (
    BookingCreate,
    BookingRead,
    BookingStatusUpdate,
    CancelRequest,
    ReviewRequest,
)
from caarvo.domain.schemas.common import envelope
from caarvo.interfaces.api.deps import get_current_user, require_customer, require_roles, require_worker
from caarvo.interfaces.deps import get_booking_repository, get_vehicle_repository

router = APIRouter(prefix="/api/bookings", tags=["Bookings"])

require_customer_or_worker = require_roles(UserRole.USER, UserRole.WORKER)


@router.get("")
def list_bookings(
    repo: BookingRepository = Depends(get_booking_repository),
    user: User = Depends(get_current_user),
):
    """Workers see bookings assigned to them; customers see their own."""
    bookings = booking_service.list_bookings(repo, user)
    return envelope([BookingRead.model_validate(b) for b in bookings], count=len(bookings))


@router.get("/{booking_id}")
def get_booking(
    booking_id: int,
    repo: BookingRepository = Depends(get_booking_repository),
    user: User = Depends(get_current_user),
):
    return envelope(BookingRead.model_validate(booking_service.get_booking(repo, booking_id, user)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_booking(
    body: BookingCreate,
    repo: BookingRepository = Depends(get_booking_repository),
    vehicle_repo: VehicleRepository = Depends(get_vehicle_repository),
    user: User = Depends(require_customer),
):
    booking = booking_service.create_booking(repo, vehicle_repo, user, body)
    return envelope(BookingRead.model_validate(booking), "Booking created successfully")


@router.put("/{booking_id}/status")
def update_booking_status(
    booking_id: int,
    body: BookingStatusUpdate,
    repo: BookingRepository = Depends(get_booking_repository),
    worker: User = Depends(require_worker),
):
    booking = booking_service.update_status_by_worker(repo, booking_id, worker, body)
    return envelope(BookingRead.model_validate(booking), "Booking status updated successfully")


@router.put("/{booking_id}/complete")
def complete_booking(
    booking_id: int,
    repo: BookingRepository = Depends(get_booking_repository),
    worker: User = Depends(require_worker),
):
    booking = booking_service.complete_booking(repo, booking_id, worker)
    return envelope(BookingRead.model_validate(booking), "Booking marked as completed")


@router.put("/{booking_id}/cancel")
def cancel_booking(
    booking_id: int,
    body: Optional[CancelRequest] = None,
    repo: BookingRepository = Depends(get_booking_repository),
    user: User = Depends(require_customer_or_worker),
):
    booking = booking_service.cancel_booking(repo, booking_id, user, body.reason if body else None)
    return envelope(BookingRead.model_validate(booking), "Booking cancelled successfully")


@router.put("/{booking_id}/review")
def review_booking(
    booking_id: int,
    body: ReviewRequest,
    repo: BookingRepository = Depends(get_booking_repository),
    user: User = Depends(require_customer),
):
    booking = booking_service.review_booking(repo, booking_id, user, body)
    return envelope(BookingRead.model_validate(booking), "Review submitted successfully")

"""Booking service: creation, role-scoped reads and lifecycle moves by customers and workers."""

from typing import Optional

import structlog

from caarvo.config import get_settings
from caarvo.core.clock import utcnow
from caarvo.core.exceptions import (
    EntityNotFoundException,
    InvalidTransitionException,
    ValidationException,
)
from caarvo.domain.lifecycle import WORKER_SETTABLE, BookingStatus, transition
from caarvo.domain.models.booking import Booking, CancelledBy, PaymentStatus
from caarvo.domain.models.user import User, UserRole
from caarvo.domain.repositories.booking_repository import BookingRepository
from caarvo.domain.repositories.vehicle_repository import VehicleRepository
from caarvo.domain.schemas.booking import BookingCreate, BookingStatusUpdate, ReviewRequest

settings = get_settings()
logger = structlog.get_logger(__name__)

NOT_FOUND = "Booking not found"


def _is_visible(booking: Booking, user: User) -> bool:
    if user.role == UserRole.ADMIN.value:
        return True
    if user.role == UserRole.WORKER.value:
        return booking.worker_id == user.id
    return booking.customer_id == user.id


def list_bookings(repo: BookingRepository, user: User) -> list[Booking]:
    if user.role == UserRole.WORKER.value:
        return repo.list_for_worker(user.id)
    return repo.list_for_customer(user.id)


def get_booking(repo: BookingRepository, booking_id: int, user: User) -> Booking:
    booking = repo.get_by_id(booking_id)
    if not booking or not _is_visible(booking, user):
        raise EntityNotFoundException(NOT_FOUND)
    return booking


def _get_assigned(repo: BookingRepository, booking_id: int, worker: User) -> Booking:
    booking = repo.get_by_id(booking_id)
    if not booking or booking.worker_id != worker.id:
        raise EntityNotFoundException(NOT_FOUND)
    return booking


def _get_owned(repo: BookingRepository, booking_id: int, customer: User) -> Booking:
    booking = repo.get_by_id(booking_id)
    if not booking or booking.customer_id != customer.id:
        raise EntityNotFoundException(NOT_FOUND)
    return booking


def record_completion(booking: Booking) -> None:
    """Completion side effects that must share the status write's commit."""
    if booking.status == BookingStatus.COMPLETED.value and booking.worker is not None:
        booking.worker.total_jobs = (booking.worker.total_jobs or 0) + 1


def create_booking(
    repo: BookingRepository,
    vehicle_repo: VehicleRepository,
    customer: User,
    data: BookingCreate,
) -> Booking:
    vehicle = vehicle_repo.get_for_owner(data.vehicle_id, customer.id)
    if not vehicle:
        raise EntityNotFoundException("Vehicle not found")
    if data.scheduled_date <= utcnow():
        raise ValidationException("Scheduled date must be in the future")

    booking = repo.create(
        {
            "customer_id": customer.id,
            "vehicle_id": vehicle.id,
            "service_type": data.service_type,
            "scheduled_date": data.scheduled_date,
            "scheduled_time": data.scheduled_time,
            "location": data.location.model_dump(),
            "price": data.price,
            "customer_notes": data.notes,
            "status": BookingStatus.PENDING.value,
            "payment_status": PaymentStatus.PENDING.value,
        }
    )
    logger.info("Booking created", booking_id=booking.id, customer_id=customer.id)
    return booking


def update_status_by_worker(
    repo: BookingRepository, booking_id: int, worker: User, data: BookingStatusUpdate
) -> Booking:
    booking = _get_assigned(repo, booking_id, worker)
    if data.status not in {s.value for s in WORKER_SETTABLE}:
        raise InvalidTransitionException(f"Workers cannot set status {data.status}")

    previous = transition(booking, data.status)
    if data.notes:
        booking.worker_notes = data.notes
    record_completion(booking)
    booking = repo.save(booking)
    logger.info(
        "Booking status updated",
        booking_id=booking.id,
        worker_id=worker.id,
        previous=previous,
        status=booking.status,
    )
    return booking


def complete_booking(repo: BookingRepository, booking_id: int, actor: User) -> Booking:
    """Mark a booking completed, allowing the pending/assigned shortcut."""
    if actor.role == UserRole.ADMIN.value:
        booking = repo.get_by_id(booking_id)
        if not booking:
            raise EntityNotFoundException(NOT_FOUND)
    else:
        booking = _get_assigned(repo, booking_id, actor)

    previous = transition(booking, BookingStatus.COMPLETED.value, shortcut=True)
    record_completion(booking)
    booking = repo.save(booking)
    logger.info("Booking completed", booking_id=booking.id, by=actor.id, previous=previous)
    return booking


def cancel_booking(
    repo: BookingRepository, booking_id: int, user: User, reason: Optional[str] = None
) -> Booking:
    booking = get_booking(repo, booking_id, user)
    if not booking.can_be_cancelled:
        raise ValidationException(
            "Booking cannot be cancelled. Only pending bookings more than "
            f"{settings.CANCELLATION_WINDOW_HOURS} hours before the scheduled time can be cancelled."
        )

    cancelled_by = (
        CancelledBy.WORKER if user.role == UserRole.WORKER.value else CancelledBy.CUSTOMER
    )
    transition(
        booking,
        BookingStatus.CANCELLED.value,
        cancelled_by=cancelled_by.value,
        reason=reason,
    )
    booking = repo.save(booking)
    logger.info("Booking cancelled", booking_id=booking.id, by=cancelled_by.value)
    return booking


def review_booking(
    repo: BookingRepository, booking_id: int, customer: User, data: ReviewRequest
) -> Booking:
    booking = _get_owned(repo, booking_id, customer)
    if booking.status != BookingStatus.COMPLETED.value:
        raise ValidationException("Can only review completed bookings")
    if booking.rating is not None:
        raise ValidationException("Booking already reviewed")

    booking.rating = data.rating
    booking.review = data.review
    booking = repo.save(booking)

    worker = booking.worker
    if worker is not None:
        average = repo.average_rating_for_worker(worker.id)
        worker.rating = round(float(average), 1) if average is not None else 0.0
        booking = repo.save(booking)
    logger.info("Booking reviewed", booking_id=booking.id, rating=data.rating)
    return booking

"""Admin service: staff management, booking assignment and dashboard analytics."""

from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import pytz
import structlog
from sqlalchemy import func
from sqlalchemy.orm import Session

from caarvo.application.services.auth_service import (
    check_identity_rules,
    create_user,
    ensure_unique,
)
from caarvo.application.services.booking_service import record_completion
from caarvo.config import get_settings
from caarvo.core.exceptions import (
    ConflictException,
    EntityNotFoundException,
    ValidationException,
)
from caarvo.domain.lifecycle import BookingStatus, transition
from caarvo.domain.models.booking import Booking, CancelledBy
from caarvo.domain.models.user import User, UserRole
from caarvo.domain.repositories.booking_repository import BookingRepository
from caarvo.domain.schemas.admin import AnalyticsPeriod
from caarvo.domain.schemas.auth import StaffRegisterRequest, WorkerRegisterRequest
from caarvo.domain.schemas.booking import AdminBookingStatusUpdate
from caarvo.domain.schemas.user import AdminUserUpdate

settings = get_settings()
logger = structlog.get_logger(__name__)
tz = pytz.timezone(settings.TIMEZONE)


# --- Staff -----------------------------------------------------------------

def register_worker(db: Session, data: WorkerRegisterRequest) -> User:
    return create_user(
        db,
        name=data.name,
        email=data.email,
        password=data.password,
        phone=data.phone,
        role=UserRole.WORKER.value,
        address=data.address.model_dump() if data.address else None,
        specialties=list(data.specialties),
    )


def register_admin(db: Session, data: StaffRegisterRequest) -> User:
    return create_user(
        db,
        name=data.name,
        email=data.email,
        password=data.password,
        phone=data.phone,
        role=UserRole.ADMIN.value,
        address=data.address.model_dump() if data.address else None,
    )


def list_users(db: Session, role: Optional[str], page: int, limit: int) -> Dict[str, Any]:
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    total = query.count()
    items = (
        query.order_by(User.created_at.desc(), User.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {"items": items, "total": total}


def list_workers(db: Session) -> list[User]:
    return (
        db.query(User)
        .filter(User.role == UserRole.WORKER.value)
        .order_by(User.name.asc(), User.id.asc())
        .all()
    )


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise EntityNotFoundException("User not found")
    return user


def update_user(db: Session, user_id: int, data: AdminUserUpdate) -> User:
    user = get_user(db, user_id)
    fields = data.model_dump(exclude_unset=True, exclude={"worker_details"})

    email = fields.get("email", user.email)
    if "email" in fields:
        email = email.strip().lower() if email else None
        fields["email"] = email
        check_identity_rules(user.role, email)
    ensure_unique(db, phone=fields.get("phone"), email=fields.get("email"), exclude_id=user.id)

    for field, value in fields.items():
        if value is not None or field == "email":
            setattr(user, field, value)

    if data.worker_details is not None:
        if user.role != UserRole.WORKER.value:
            raise ValidationException("Worker details apply to workers only")
        details = data.worker_details
        if details.is_available is not None:
            user.is_available = details.is_available
        if details.specialties is not None:
            user.specialties = list(details.specialties)

    db.commit()
    db.refresh(user)
    logger.info("User updated by admin", user_id=user.id, fields=sorted(fields))
    return user


def set_user_active(db: Session, user_id: int, is_active: bool) -> User:
    user = get_user(db, user_id)
    user.is_active = is_active
    db.commit()
    db.refresh(user)
    logger.info("User status changed", user_id=user.id, is_active=is_active)
    return user


def set_worker_availability(db: Session, worker_id: int, is_available: bool) -> User:
    worker = db.get(User, worker_id)
    if not worker or worker.role != UserRole.WORKER.value:
        raise EntityNotFoundException("Worker not found")
    worker.is_available = is_available
    db.commit()
    db.refresh(worker)
    return worker


# --- Bookings --------------------------------------------------------------

def assign_worker(db: Session, repo: BookingRepository, booking_id: int, worker_id: int) -> Booking:
    worker = db.get(User, worker_id)
    if (
        not worker
        or worker.role != UserRole.WORKER.value
        or not worker.is_active
        or not worker.is_available
    ):
        raise EntityNotFoundException("Worker not found or not available")

    booking = repo.get_by_id(booking_id)
    if not booking:
        raise EntityNotFoundException("Booking not found")
    if booking.status != BookingStatus.PENDING.value:
        raise ValidationException("Only pending bookings can be assigned")

    if not repo.claim_pending(booking_id, worker_id):
        raise ConflictException("Booking was assigned by another request")

    db.refresh(booking)
    logger.info("Booking assigned", booking_id=booking_id, worker_id=worker_id)
    return booking


def update_booking_status(repo: BookingRepository, booking_id: int, data: AdminBookingStatusUpdate) -> Booking:
    """Any table-allowed move. Admin cancellation skips the customer cancellation window."""
    booking = repo.get_by_id(booking_id)
    if not booking:
        raise EntityNotFoundException("Booking not found")
    if data.status == BookingStatus.ASSIGNED.value and booking.worker_id is None:
        raise ValidationException("Assign a worker before setting status to assigned")

    previous = transition(
        booking,
        data.status,
        cancelled_by=CancelledBy.ADMIN.value,
        reason=data.reason,
    )
    if data.notes:
        booking.worker_notes = data.notes
    record_completion(booking)
    booking = repo.save(booking)
    logger.info("Booking status set by admin", booking_id=booking.id, previous=previous, status=booking.status)
    return booking


# --- Analytics -------------------------------------------------------------

def period_start(period: str, now: Optional[datetime] = None) -> datetime:
    now = now.astimezone(tz) if now else datetime.now(tz)
    if period == AnalyticsPeriod.WEEK.value:
        return now - timedelta(days=7)
    if period == AnalyticsPeriod.YEAR.value:
        return tz.localize(datetime(now.year, 1, 1))
    return tz.localize(datetime(now.year, now.month, 1))


def get_analytics(db: Session, repo: BookingRepository, period: str) -> Dict[str, Any]:
    if period not in {p.value for p in AnalyticsPeriod}:
        period = AnalyticsPeriod.MONTH.value
    start = period_start(period)

    role_counts = dict(
        db.query(User.role, func.count(User.id)).group_by(User.role).all()
    )
    stats = repo.get_analytics(start)
    return {
        "period": period,
        "start_date": start,
        **stats,
        "total_users": role_counts.get(UserRole.USER.value, 0),
        "total_workers": role_counts.get(UserRole.WORKER.value, 0),
        "total_admins": role_counts.get(UserRole.ADMIN.value, 0),
    }

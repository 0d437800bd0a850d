"""Admin API routes. Every route is behind the router-level admin gate."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from caarvo.application.services import admin_service, booking_service
from caarvo.domain.lifecycle import BookingStatus
from caarvo.domain.models.user import User, UserRole
from caarvo.domain.repositories.booking_repository import BookingRepository
from caarvo.domain.repositories.vehicle_repository import VehicleRepository
from caarvo.domain.schemas.admin import Analytics
from caarvo.domain.schemas.auth import StaffRegisterRequest, WorkerRegisterRequest
from caarvo.domain.schemas.booking import AdminBookingStatusUpdate, AssignRequest, BookingRead
from caarvo.domain.schemas.common import envelope, page_meta
from caarvo.domain.schemas.user import (
    ActiveStatusUpdate,
    AdminUserUpdate,
    AvailabilityUpdate,
    UserRead,
)
from caarvo.domain.schemas.vehicle import VehicleWithOwner
from caarvo.infrastructure.database import get_db
from caarvo.interfaces.api.deps import require_admin
from caarvo.interfaces.deps import get_booking_repository, get_vehicle_repository

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)


# --- Staff registration ----------------------------------------------------

@router.post("/register-worker", status_code=status.HTTP_201_CREATED)
def register_worker(body: WorkerRegisterRequest, db: Session = Depends(get_db)):
    worker = admin_service.register_worker(db, body)
    return envelope(UserRead.model_validate(worker), "Worker registered successfully")


@router.post("/register-admin", status_code=status.HTTP_201_CREATED)
def register_admin(body: StaffRegisterRequest, db: Session = Depends(get_db)):
    admin = admin_service.register_admin(db, body)
    return envelope(UserRead.model_validate(admin), "Admin registered successfully")


# --- Users -----------------------------------------------------------------

@router.get("/users")
def list_users(
    role: Optional[UserRole] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    result = admin_service.list_users(db, role.value if role else None, page, limit)
    items = [UserRead.model_validate(u) for u in result["items"]]
    return envelope(items, **page_meta(result["total"], page, limit, len(items)))


@router.get("/workers")
def list_workers(db: Session = Depends(get_db)):
    workers = admin_service.list_workers(db)
    return envelope([UserRead.model_validate(w) for w in workers], count=len(workers))


@router.put("/users/{user_id}")
def update_user(user_id: int, body: AdminUserUpdate, db: Session = Depends(get_db)):
    user = admin_service.update_user(db, user_id, body)
    return envelope(UserRead.model_validate(user), "User updated successfully")


@router.put("/users/{user_id}/status")
def update_user_status(user_id: int, body: ActiveStatusUpdate, db: Session = Depends(get_db)):
    user = admin_service.set_user_active(db, user_id, body.is_active)
    state = "activated" if user.is_active else "deactivated"
    return envelope(UserRead.model_validate(user), f"User {state} successfully")


@router.put("/workers/{worker_id}/availability")
def update_worker_availability(
    worker_id: int, body: AvailabilityUpdate, db: Session = Depends(get_db)
):
    worker = admin_service.set_worker_availability(db, worker_id, body.is_available)
    return envelope(UserRead.model_validate(worker), "Worker availability updated successfully")


# --- Vehicles --------------------------------------------------------------

@router.get("/vehicles")
def list_vehicles(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    repo: VehicleRepository = Depends(get_vehicle_repository),
):
    result = repo.paginate(page, limit)
    items = [VehicleWithOwner.model_validate(v) for v in result["items"]]
    return envelope(items, **page_meta(result["total"], page, limit, len(items)))


# --- Bookings --------------------------------------------------------------

@router.get("/bookings")
def list_bookings(
    status: Optional[BookingStatus] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    repo: BookingRepository = Depends(get_booking_repository),
):
    result = repo.paginate(status.value if status else None, page, limit)
    items = [BookingRead.model_validate(b) for b in result["items"]]
    return envelope(items, **page_meta(result["total"], page, limit, len(items)))


@router.put("/bookings/{booking_id}/assign")
def assign_booking(
    booking_id: int,
    body: AssignRequest,
    db: Session = Depends(get_db),
    repo: BookingRepository = Depends(get_booking_repository),
):
    booking = admin_service.assign_worker(db, repo, booking_id, body.worker_id)
    return envelope(BookingRead.model_validate(booking), "Worker assigned successfully")


@router.put("/bookings/{booking_id}/complete")
def complete_booking(
    booking_id: int,
    repo: BookingRepository = Depends(get_booking_repository),
    admin: User = Depends(require_admin),
):
    booking = booking_service.complete_booking(repo, booking_id, admin)
    return envelope(BookingRead.model_validate(booking), "Booking marked as completed")


@router.put("/bookings/{booking_id}/status")
def update_booking_status(
    booking_id: int,
    body: AdminBookingStatusUpdate,
    repo: BookingRepository = Depends(get_booking_repository),
):
    booking = admin_service.update_booking_status(repo, booking_id, body)
    return envelope(BookingRead.model_validate(booking), "Booking status updated successfully")


# --- Analytics -------------------------------------------------------------

@router.get("/analytics")
def analytics(
    period: str = "month",
    db: Session = Depends(get_db),
    repo: BookingRepository = Depends(get_booking_repository),
):
    return envelope(Analytics.model_validate(admin_service.get_analytics(db, repo, period)))

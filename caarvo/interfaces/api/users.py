"""User API routes: profile aliases, worker availability and admin lookup."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from caarvo.application.services import admin_service, auth_service
from caarvo.domain.models.user import User
from caarvo.domain.schemas.common import envelope
from caarvo.domain.schemas.user import AvailabilityUpdate, ProfileUpdate, UserRead
from caarvo.infrastructure.database import get_db
from caarvo.interfaces.api.deps import get_current_user, require_admin, require_worker

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("/profile")
def get_profile(user: User = Depends(get_current_user)):
    return envelope(UserRead.model_validate(user))


@router.put("/profile")
def update_profile(
    body: ProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    user = auth_service.update_profile(
        db,
        user,
        name=body.name,
        phone=body.phone,
        address=body.address.model_dump() if body.address else None,
    )
    return envelope(UserRead.model_validate(user), "Profile updated successfully")


@router.put("/availability")
def update_availability(
    body: AvailabilityUpdate,
    db: Session = Depends(get_db),
    worker: User = Depends(require_worker),
):
    """Workers toggle whether they can receive new assignments."""
    worker = admin_service.set_worker_availability(db, worker.id, body.is_available)
    return envelope(UserRead.model_validate(worker), "Availability updated successfully")


@router.get("/{user_id}")
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return envelope(UserRead.model_validate(admin_service.get_user(db, user_id)))

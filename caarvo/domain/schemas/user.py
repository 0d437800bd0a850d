"""Pydantic schemas for user profiles and staff management."""

from typing import Optional

from pydantic import EmailStr, Field

from caarvo.domain.models.booking import ServiceType
from caarvo.domain.schemas.common import CamelModel, Phone, UtcDatetime


class PostalAddress(CamelModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None


class WorkerDetails(CamelModel):
    is_available: bool = True
    rating: float = 0.0
    total_jobs: int = 0
    specialties: list[ServiceType] = []


class UserRead(CamelModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    role: str
    address: Optional[PostalAddress] = None
    is_active: bool
    profile_image: str = ""
    worker_details: Optional[WorkerDetails] = None
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None


class UserSummary(CamelModel):
    """Embedded in booking and vehicle responses."""

    id: int
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None


class ProfileUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    phone: Optional[Phone] = None
    address: Optional[PostalAddress] = None


class AvailabilityUpdate(CamelModel):
    is_available: bool


class ActiveStatusUpdate(CamelModel):
    is_active: bool


class WorkerDetailsUpdate(CamelModel):
    is_available: Optional[bool] = None
    specialties: Optional[list[ServiceType]] = None


class AdminUserUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    phone: Optional[Phone] = None
    email: Optional[EmailStr] = None
    is_active: Optional[bool] = None
    worker_details: Optional[WorkerDetailsUpdate] = None

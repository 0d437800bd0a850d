"""Pydantic schemas for vehicles."""

from typing import Annotated, Optional

from pydantic import AfterValidator, Field

from caarvo.core.clock import utcnow
from caarvo.domain.models.vehicle import VehicleSize, VehicleType
from caarvo.domain.schemas.common import CamelModel, UtcDatetime
from caarvo.domain.schemas.user import UserSummary

MIN_YEAR = 1900


def _check_year(value: int) -> int:
    max_year = utcnow().year + 1
    if not MIN_YEAR <= value <= max_year:
        raise ValueError(f"Year must be between {MIN_YEAR} and {max_year}")
    return value


def _normalize_plate(value: str) -> str:
    value = value.strip().upper()
    if not value:
        raise ValueError("License plate is required")
    return value


ModelYear = Annotated[int, AfterValidator(_check_year)]
LicensePlate = Annotated[str, Field(max_length=20), AfterValidator(_normalize_plate)]


class VehicleCreate(CamelModel):
    make: str = Field(min_length=1, max_length=100)
    model: str = Field(min_length=1, max_length=100)
    year: ModelYear
    license_plate: LicensePlate
    color: str = Field(min_length=1, max_length=50)
    vehicle_type: VehicleType
    size: VehicleSize
    notes: Optional[str] = Field(default=None, max_length=500)


class VehicleUpdate(CamelModel):
    make: Optional[str] = Field(default=None, min_length=1, max_length=100)
    model: Optional[str] = Field(default=None, min_length=1, max_length=100)
    year: Optional[ModelYear] = None
    license_plate: Optional[LicensePlate] = None
    color: Optional[str] = Field(default=None, min_length=1, max_length=50)
    vehicle_type: Optional[VehicleType] = None
    size: Optional[VehicleSize] = None
    notes: Optional[str] = Field(default=None, max_length=500)


class VehicleSummary(CamelModel):
    id: int
    make: str
    model: str
    year: int
    license_plate: str
    color: str
    vehicle_type: str
    size: str


class VehicleRead(VehicleSummary):
    owner_id: int
    is_active: bool
    notes: Optional[str] = None
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None


class VehicleWithOwner(VehicleRead):
    owner: Optional[UserSummary] = None

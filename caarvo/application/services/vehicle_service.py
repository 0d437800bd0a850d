"""Vehicle service: owner-scoped CRUD with soft delete."""

import structlog

from caarvo.core.exceptions import ConflictException, EntityNotFoundException, ValidationException
from caarvo.domain.models.vehicle import Vehicle
from caarvo.domain.repositories.vehicle_repository import VehicleRepository
from caarvo.domain.schemas.vehicle import VehicleCreate, VehicleUpdate

logger = structlog.get_logger(__name__)

DUPLICATE_PLATE = "Vehicle with this license plate already exists"
REMOVED_PLATE = "A removed vehicle uses this license plate. Add it again to restore it."

REQUIRED_FIELDS = ("make", "model", "year", "license_plate", "color", "vehicle_type", "size")


def list_vehicles(repo: VehicleRepository, owner_id: int) -> list[Vehicle]:
    return repo.list_active_for_owner(owner_id)


def get_vehicle(repo: VehicleRepository, vehicle_id: int, owner_id: int) -> Vehicle:
    vehicle = repo.get_for_owner(vehicle_id, owner_id)
    if not vehicle:
        raise EntityNotFoundException("Vehicle not found")
    return vehicle


def create_vehicle(repo: VehicleRepository, owner_id: int, data: VehicleCreate) -> Vehicle:
    existing = repo.find_by_plate(owner_id, data.license_plate)
    if existing and existing.is_active:
        raise ConflictException(DUPLICATE_PLATE)

    fields = data.model_dump()
    if existing:
        # Re-adding a removed vehicle brings the old row back with the new details
        fields["is_active"] = True
        vehicle = repo.update(existing, fields)
        logger.info("Vehicle reactivated", vehicle_id=vehicle.id, owner_id=owner_id)
        return vehicle

    vehicle = repo.create({**fields, "owner_id": owner_id})
    logger.info("Vehicle created", vehicle_id=vehicle.id, owner_id=owner_id)
    return vehicle


def update_vehicle(repo: VehicleRepository, vehicle_id: int, owner_id: int, data: VehicleUpdate) -> Vehicle:
    vehicle = get_vehicle(repo, vehicle_id, owner_id)
    fields = data.model_dump(exclude_unset=True)
    cleared = [name for name in REQUIRED_FIELDS if name in fields and fields[name] is None]
    if cleared:
        raise ValidationException(f"{cleared[0]} cannot be empty", details={"fields": cleared})

    plate = fields.get("license_plate")
    if plate and plate != vehicle.license_plate:
        # The plate stays reserved by a soft-deleted row until that vehicle is re-added
        taken = repo.find_by_plate(owner_id, plate)
        if taken:
            raise ConflictException(DUPLICATE_PLATE if taken.is_active else REMOVED_PLATE)
    return repo.update(vehicle, fields)


def delete_vehicle(repo: VehicleRepository, vehicle_id: int, owner_id: int) -> None:
    vehicle = get_vehicle(repo, vehicle_id, owner_id)
    repo.update(vehicle, {"is_active": False})
    logger.info("Vehicle removed", vehicle_id=vehicle_id, owner_id=owner_id)

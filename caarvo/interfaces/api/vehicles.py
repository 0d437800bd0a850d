"""Vehicle API routes: the caller's own vehicles."""

from fastapi import APIRouter, Depends, status

from caarvo.application.services import vehicle_service
from caarvo.domain.models.user import User
from caarvo.domain.repositories.vehicle_repository import VehicleRepository
from caarvo.domain.schemas.common import envelope
from caarvo.domain.schemas.vehicle import VehicleCreate, VehicleRead, VehicleUpdate
from caarvo.interfaces.api.deps import get_current_user
from caarvo.interfaces.deps import get_vehicle_repository

router = APIRouter(prefix="/api/vehicles", tags=["Vehicles"])


@router.get("")
def list_vehicles(
    repo: VehicleRepository = Depends(get_vehicle_repository),
    user: User = Depends(get_current_user),
):
    vehicles = vehicle_service.list_vehicles(repo, user.id)
    return envelope([VehicleRead.model_validate(v) for v in vehicles], count=len(vehicles))


@router.get("/{vehicle_id}")
def get_vehicle(
    vehicle_id: int,
    repo: VehicleRepository = Depends(get_vehicle_repository),
    user: User = Depends(get_current_user),
):
    return envelope(VehicleRead.model_validate(vehicle_service.get_vehicle(repo, vehicle_id, user.id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_vehicle(
    body: VehicleCreate,
    repo: VehicleRepository = Depends(get_vehicle_repository),
    user: User = Depends(get_current_user),
):
    vehicle = vehicle_service.create_vehicle(repo, user.id, body)
    return envelope(VehicleRead.model_validate(vehicle), "Vehicle added successfully")


@router.put("/{vehicle_id}")
def update_vehicle(
    vehicle_id: int,
    body: VehicleUpdate,
    repo: VehicleRepository = Depends(get_vehicle_repository),
    user: User = Depends(get_current_user),
):
    vehicle = vehicle_service.update_vehicle(repo, vehicle_id, user.id, body)
    return envelope(VehicleRead.model_validate(vehicle), "Vehicle updated successfully")


@router.delete("/{vehicle_id}")
def delete_vehicle(
    vehicle_id: int,
    repo: VehicleRepository = Depends(get_vehicle_repository),
    user: User = Depends(get_current_user),
):
    vehicle_service.delete_vehicle(repo, vehicle_id, user.id)
    return envelope(message="Vehicle deleted successfully")

"""Address API routes: the caller's saved addresses."""

from fastapi import APIRouter, Depends, status

from caarvo.application.services import address_service
from caarvo.domain.models.user import User
from caarvo.domain.repositories.address_repository import AddressRepository
from caarvo.domain.schemas.address import AddressCreate, AddressRead, AddressUpdate
from caarvo.domain.schemas.common import envelope
from caarvo.interfaces.api.deps import get_current_user
from caarvo.interfaces.deps import get_address_repository

router = APIRouter(prefix="/api/addresses", tags=["Addresses"])


@router.get("")
def list_addresses(
    repo: AddressRepository = Depends(get_address_repository),
    user: User = Depends(get_current_user),
):
    addresses = address_service.list_addresses(repo, user.id)
    return envelope([AddressRead.model_validate(a) for a in addresses], count=len(addresses))


# Registered before /{address_id} so "default" is not parsed as an id
@router.get("/default")
def get_default_address(
    repo: AddressRepository = Depends(get_address_repository),
    user: User = Depends(get_current_user),
):
    return envelope(AddressRead.model_validate(address_service.get_default_address(repo, user.id)))


@router.get("/{address_id}")
def get_address(
    address_id: int,
    repo: AddressRepository = Depends(get_address_repository),
    user: User = Depends(get_current_user),
):
    return envelope(AddressRead.model_validate(address_service.get_address(repo, address_id, user.id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_address(
    body: AddressCreate,
    repo: AddressRepository = Depends(get_address_repository),
    user: User = Depends(get_current_user),
):
    address = address_service.create_address(repo, user.id, body)
    return envelope(AddressRead.model_validate(address), "Address added successfully")


@router.put("/{address_id}")
def update_address(
    address_id: int,
    body: AddressUpdate,
    repo: AddressRepository = Depends(get_address_repository),
    user: User = Depends(get_current_user),
):
    address = address_service.update_address(repo, address_id, user.id, body)
    return envelope(AddressRead.model_validate(address), "Address updated successfully")


@router.put("/{address_id}/default")
def set_default_address(
    address_id: int,
    repo: AddressRepository = Depends(get_address_repository),
    user: User = Depends(get_current_user),
):
    address = address_service.set_default_address(repo, address_id, user.id)
    return envelope(AddressRead.model_validate(address), "Default address updated successfully")


@router.delete("/{address_id}")
def delete_address(
    address_id: int,
    repo: AddressRepository = Depends(get_address_repository),
    user: User = Depends(get_current_user),
):
    address_service.delete_address(repo, address_id, user.id)
    return envelope(message="Address deleted successfully")

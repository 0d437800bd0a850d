"""Address service: owner-scoped CRUD, one default address per owner.

Default flips clear the siblings and set the target before a single commit.
"""

from typing import Any

import structlog

from caarvo.core.exceptions import EntityNotFoundException, ValidationException
from caarvo.domain.models.address import Address
from caarvo.domain.repositories.address_repository import AddressRepository
from caarvo.domain.schemas.address import AddressCreate, AddressUpdate

logger = structlog.get_logger(__name__)

REQUIRED_FIELDS = ("street", "city", "state", "zip_code", "country")


def _columns(data: AddressCreate | AddressUpdate, exclude_unset: bool) -> dict[str, Any]:
    fields = data.model_dump(exclude_unset=exclude_unset, exclude={"coordinates"})
    if "coordinates" in data.model_fields_set or not exclude_unset:
        coords = data.coordinates
        fields["lat"] = coords.lat if coords else None
        fields["lng"] = coords.lng if coords else None
    return fields


def list_addresses(repo: AddressRepository, owner_id: int) -> list[Address]:
    return repo.list_active_for_owner(owner_id)


def get_address(repo: AddressRepository, address_id: int, owner_id: int) -> Address:
    address = repo.get_for_owner(address_id, owner_id)
    if not address:
        raise EntityNotFoundException("Address not found")
    return address


def get_default_address(repo: AddressRepository, owner_id: int) -> Address:
    address = repo.get_default(owner_id)
    if not address:
        raise EntityNotFoundException("No default address found")
    return address


def create_address(repo: AddressRepository, owner_id: int, data: AddressCreate) -> Address:
    fields = _columns(data, exclude_unset=False)
    if fields.get("is_default"):
        repo.clear_default(owner_id)
    address = repo.create({**fields, "owner_id": owner_id})
    logger.info("Address created", address_id=address.id, owner_id=owner_id)
    return address


def update_address(repo: AddressRepository, address_id: int, owner_id: int, data: AddressUpdate) -> Address:
    address = get_address(repo, address_id, owner_id)
    fields = _columns(data, exclude_unset=True)
    cleared = [name for name in REQUIRED_FIELDS if name in fields and fields[name] is None]
    if cleared:
        raise ValidationException(f"{cleared[0]} cannot be empty", details={"fields": cleared})
    if fields.get("is_default") is None:
        fields.pop("is_default", None)
    elif fields["is_default"]:
        repo.clear_default(owner_id, exclude_id=address.id)
    return repo.update(address, fields)


def set_default_address(repo: AddressRepository, address_id: int, owner_id: int) -> Address:
    address = get_address(repo, address_id, owner_id)
    repo.clear_default(owner_id, exclude_id=address.id)
    address.is_default = True
    return repo.save(address)


def delete_address(repo: AddressRepository, address_id: int, owner_id: int) -> None:
    address = get_address(repo, address_id, owner_id)
    if address.is_default and repo.count_active(owner_id) <= 1:
        raise ValidationException("Cannot delete the only address. Please add another address first.")

    was_default = address.is_default
    address.is_active = False
    address.is_default = False
    if was_default:
        successor = repo.latest_active(owner_id, exclude_id=address.id)
        if successor:
            successor.is_default = True
    repo.save(address)
    logger.info("Address removed", address_id=address_id, owner_id=owner_id)

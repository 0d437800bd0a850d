"""
SQLAlchemy Implementation of Address Repository.
"""

from typing import List, Optional

from sqlalchemy import func

from caarvo.domain.models.address import Address
from caarvo.domain.repositories.address_repository import AddressRepository
from caarvo.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyAddressRepository(SQLAlchemyRepository[Address], AddressRepository):
    """Address repository implementation using SQLAlchemy."""

    def _active(self, owner_id: int):
        return self.db.query(Address).filter(
            Address.owner_id == owner_id,
            Address.is_active.is_(True),
        )

    def list_active_for_owner(self, owner_id: int) -> List[Address]:
        return (
            self._active(owner_id)
            .order_by(Address.is_default.desc(), Address.created_at.desc(), Address.id.desc())
            .all()
        )

    def get_for_owner(self, address_id: int, owner_id: int) -> Optional[Address]:
        return self._active(owner_id).filter(Address.id == address_id).first()

    def get_default(self, owner_id: int) -> Optional[Address]:
        return self._active(owner_id).filter(Address.is_default.is_(True)).first()

    def latest_active(self, owner_id: int, exclude_id: Optional[int] = None) -> Optional[Address]:
        query = self._active(owner_id)
        if exclude_id is not None:
            query = query.filter(Address.id != exclude_id)
        return query.order_by(Address.created_at.desc(), Address.id.desc()).first()

    def count_active(self, owner_id: int) -> int:
        return (
            self.db.query(func.count(Address.id))
            .filter(Address.owner_id == owner_id, Address.is_active.is_(True))
            .scalar()
            or 0
        )

    def clear_default(self, owner_id: int, exclude_id: Optional[int] = None) -> None:
        query = self.db.query(Address).filter(
            Address.owner_id == owner_id,
            Address.is_default.is_(True),
        )
        if exclude_id is not None:
            query = query.filter(Address.id != exclude_id)
        query.update({Address.is_default: False}, synchronize_session="fetch")

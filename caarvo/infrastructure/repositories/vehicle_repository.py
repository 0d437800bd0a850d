"""
SQLAlchemy Implementation of Vehicle Repository.
"""

from typing import Any, Dict, List, Optional

from caarvo.domain.models.vehicle import Vehicle
from caarvo.domain.repositories.vehicle_repository import VehicleRepository
from caarvo.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyVehicleRepository(SQLAlchemyRepository[Vehicle], VehicleRepository):
    """Vehicle repository implementation using SQLAlchemy."""

    def list_active_for_owner(self, owner_id: int) -> List[Vehicle]:
        return (
            self.db.query(Vehicle)
            .filter(Vehicle.owner_id == owner_id, Vehicle.is_active.is_(True))
            .order_by(Vehicle.created_at.desc(), Vehicle.id.desc())
            .all()
        )

    def get_for_owner(self, vehicle_id: int, owner_id: int) -> Optional[Vehicle]:
        return (
            self.db.query(Vehicle)
            .filter(
                Vehicle.id == vehicle_id,
                Vehicle.owner_id == owner_id,
                Vehicle.is_active.is_(True),
            )
            .first()
        )

    def find_by_plate(self, owner_id: int, license_plate: str) -> Optional[Vehicle]:
        return (
            self.db.query(Vehicle)
            .filter(Vehicle.owner_id == owner_id, Vehicle.license_plate == license_plate)
            .first()
        )

    def paginate(self, page: int, limit: int) -> Dict[str, Any]:
        query = self.db.query(Vehicle)
        total = query.count()
        items = (
            query.order_by(Vehicle.created_at.desc(), Vehicle.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return {"items": items, "total": total}

"""
Vehicle Repository Interface.
"""

from typing import Any, Dict, List, Optional

from caarvo.domain.repositories.base import BaseRepository
from caarvo.domain.models.vehicle import Vehicle


class VehicleRepository(BaseRepository[Vehicle]):
    """Interface for Vehicle-specific operations."""

    def list_active_for_owner(self, owner_id: int) -> List[Vehicle]:
        """Active vehicles of one owner, newest first."""
        ...

    def get_for_owner(self, vehicle_id: int, owner_id: int) -> Optional[Vehicle]:
        """An active vehicle, only if it belongs to the owner."""
        ...

    def find_by_plate(self, owner_id: int, license_plate: str) -> Optional[Vehicle]:
        """Any vehicle (active or soft-deleted) of the owner with this plate."""
        ...

    def paginate(self, page: int, limit: int) -> Dict[str, Any]:
        """All vehicles with owners, for the admin dashboard."""
        ...

"""
Address Repository Interface.
"""

from typing import List, Optional

from caarvo.domain.repositories.base import BaseRepository
from caarvo.domain.models.address import Address


class AddressRepository(BaseRepository[Address]):
    """Interface for Address-specific operations."""

    def list_active_for_owner(self, owner_id: int) -> List[Address]:
        """Active addresses, default first, then newest."""
        ...

    def get_for_owner(self, address_id: int, owner_id: int) -> Optional[Address]:
        ...

    def get_default(self, owner_id: int) -> Optional[Address]:
        ...

    def latest_active(self, owner_id: int, exclude_id: Optional[int] = None) -> Optional[Address]:
        """Most recently created active address, used to promote a new default."""
        ...

    def count_active(self, owner_id: int) -> int:
        ...

    def clear_default(self, owner_id: int, exclude_id: Optional[int] = None) -> None:
        """Unset the default flag on the owner's addresses without committing."""
        ...

"""
Base Repository Interface.
Defines the standard contract for data access operations.
"""

from typing import TypeVar, Optional, Any, Protocol

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Interface for generic persistence operations."""

    def get_by_id(self, id: int) -> Optional[T]:
        """Get a single entity by ID."""
        ...

    def create(self, obj_in: Any) -> T:
        """Create a new entity from a dict or schema and commit it."""
        ...

    def update(self, db_obj: T, obj_in: Any) -> T:
        """Apply the set fields of a dict or schema and commit."""
        ...

    def save(self, db_obj: T) -> T:
        """Commit pending changes on an already-loaded entity."""
        ...

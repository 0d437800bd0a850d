"""
Booking Repository Interface.
Defines the data access operations behind the booking lifecycle and admin analytics.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from caarvo.domain.repositories.base import BaseRepository
from caarvo.domain.models.booking import Booking


class BookingRepository(BaseRepository[Booking]):
    """Interface for Booking-specific operations."""

    def list_for_customer(self, customer_id: int) -> List[Booking]:
        """A customer's bookings, newest scheduled first."""
        ...

    def list_for_worker(self, worker_id: int) -> List[Booking]:
        """Bookings assigned to a worker, newest scheduled first."""
        ...

    def paginate(self, status: Optional[str], page: int, limit: int) -> Dict[str, Any]:
        """All bookings, optionally filtered by status."""
        ...

    def claim_pending(self, booking_id: int, worker_id: int) -> bool:
        """Assign a worker only if the booking is still pending. True if this call won."""
        ...

    def average_rating_for_worker(self, worker_id: int) -> Optional[float]:
        ...

    def get_analytics(self, since: datetime) -> Dict[str, Any]:
        """Booking counts, revenue and rating for bookings created since a point in time."""
        ...

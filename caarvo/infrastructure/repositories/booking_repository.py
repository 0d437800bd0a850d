"""
SQLAlchemy Implementation of Booking Repository.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import func, update

from caarvo.domain.lifecycle import BookingStatus
from caarvo.domain.models.booking import Booking
from caarvo.domain.repositories.booking_repository import BookingRepository
from caarvo.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyBookingRepository(SQLAlchemyRepository[Booking], BookingRepository):
    """Booking repository implementation using SQLAlchemy."""

    def _newest_first(self, query):
        return query.order_by(Booking.scheduled_date.desc(), Booking.id.desc())

    def list_for_customer(self, customer_id: int) -> List[Booking]:
        return self._newest_first(
            self.db.query(Booking).filter(Booking.customer_id == customer_id)
        ).all()

    def list_for_worker(self, worker_id: int) -> List[Booking]:
        return self._newest_first(
            self.db.query(Booking).filter(Booking.worker_id == worker_id)
        ).all()

    def paginate(self, status: Optional[str], page: int, limit: int) -> Dict[str, Any]:
        query = self.db.query(Booking)
        if status:
            query = query.filter(Booking.status == status)
        total = query.count()
        items = (
            query.order_by(Booking.created_at.desc(), Booking.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return {"items": items, "total": total}

    def claim_pending(self, booking_id: int, worker_id: int) -> bool:
        result = self.db.execute(
            update(Booking)
            .where(
                Booking.id == booking_id,
                Booking.status == BookingStatus.PENDING.value,
            )
            .values(
                worker_id=worker_id,
                status=BookingStatus.ASSIGNED.value,
                version_id=Booking.version_id + 1,
            )
            .execution_options(synchronize_session=False)
        )
        won = result.rowcount == 1
        if won:
            self.db.commit()
        return won

    def average_rating_for_worker(self, worker_id: int) -> Optional[float]:
        return (
            self.db.query(func.avg(Booking.rating))
            .filter(Booking.worker_id == worker_id, Booking.rating.isnot(None))
            .scalar()
        )

    def get_analytics(self, since: datetime) -> Dict[str, Any]:
        since = since.astimezone(timezone.utc)
        in_period = Booking.created_at >= since

        rows = (
            self.db.query(Booking.status, func.count(Booking.id).label("count"))
            .filter(in_period)
            .group_by(Booking.status)
            .order_by(func.count(Booking.id).desc())
            .all()
        )
        by_status = {r.status: r.count for r in rows}

        revenue = (
            self.db.query(func.coalesce(func.sum(Booking.price), 0))
            .filter(in_period, Booking.status == BookingStatus.COMPLETED.value)
            .scalar()
        )
        average_rating = (
            self.db.query(func.avg(Booking.rating))
            .filter(in_period, Booking.rating.isnot(None))
            .scalar()
        )

        return {
            "total_bookings": sum(by_status.values()),
            "completed_bookings": by_status.get(BookingStatus.COMPLETED.value, 0),
            "pending_bookings": by_status.get(BookingStatus.PENDING.value, 0),
            "cancelled_bookings": by_status.get(BookingStatus.CANCELLED.value, 0),
            "total_revenue": float(revenue or 0),
            "average_rating": round(float(average_rating), 1) if average_rating is not None else 0.0,
            "status_distribution": [{"status": r.status, "count": r.count} for r in rows],
        }

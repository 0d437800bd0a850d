"""Booking domain model: a scheduled cleaning job."""

import enum
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Text, JSON, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from caarvo.config import get_settings
from caarvo.core.clock import as_utc, utcnow
from caarvo.domain.lifecycle import BookingStatus
from caarvo.infrastructure.database import Base


class ServiceType(str, enum.Enum):
    EXTERIOR = "exterior"
    INTERIOR = "interior"
    FULL_SERVICE = "full-service"
    PREMIUM = "premium"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class CancelledBy(str, enum.Enum):
    CUSTOMER = "customer"
    WORKER = "worker"
    ADMIN = "admin"


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_customer_date", "customer_id", "scheduled_date"),
        Index("ix_bookings_worker_date", "worker_id", "scheduled_date"),
        Index("ix_bookings_status_date", "status", "scheduled_date"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False)
    worker_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    service_type = Column(String(20), nullable=False)
    scheduled_date = Column(DateTime(timezone=True), nullable=False)
    scheduled_time = Column(String(50), nullable=False)
    location = Column(JSON, nullable=False)  # address snapshot, not a foreign key
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value)
    price = Column(Float, nullable=False)

    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)
    razorpay_order_id = Column(String(100), nullable=True, index=True)
    razorpay_payment_id = Column(String(100), nullable=True)
    razorpay_signature = Column(String(500), nullable=True)

    customer_notes = Column(Text, nullable=True)
    worker_notes = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)
    review = Column(Text, nullable=True)

    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_by = Column(String(20), nullable=True)
    cancellation_reason = Column(String(200), nullable=True)

    version_id = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    customer = relationship("User", foreign_keys=[customer_id], lazy="joined")
    worker = relationship("User", foreign_keys=[worker_id], lazy="joined")
    vehicle = relationship("Vehicle", lazy="joined")

    __mapper_args__ = {"version_id_col": version_id}

    @property
    def notes(self) -> dict:
        return {"customer": self.customer_notes, "worker": self.worker_notes}

    @property
    def is_past(self) -> bool:
        return as_utc(self.scheduled_date) < utcnow()

    @property
    def can_be_cancelled(self) -> bool:
        return self.cancellable_at(utcnow())

    def cancellable_at(self, now: datetime, window_hours: Optional[int] = None) -> bool:
        """Pending and more than the cancellation window away from the scheduled time."""
        if window_hours is None:
            window_hours = get_settings().CANCELLATION_WINDOW_HOURS
        if self.status != BookingStatus.PENDING.value:
            return False
        return as_utc(self.scheduled_date) - now > timedelta(hours=window_hours)

    def __repr__(self):
        return f"<Booking {self.id} {self.status}>"

"""User domain model: customers, workers and admins share the 'users' table."""

import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float, JSON
from sqlalchemy.sql import func

from caarvo.infrastructure.database import Base


class UserRole(str, enum.Enum):
    USER = "user"
    WORKER = "worker"
    ADMIN = "admin"


STAFF_ROLES = (UserRole.WORKER, UserRole.ADMIN)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True, nullable=True, index=True)
    phone = Column(String(20), unique=True, nullable=True, index=True)
    password_hash = Column(String(255), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.USER.value, index=True)
    address = Column(JSON, nullable=True)  # {street, city, state, zipCode}
    is_active = Column(Boolean, nullable=False, default=True)
    profile_image = Column(String(500), nullable=False, default="")

    # Worker-only details
    is_available = Column(Boolean, nullable=False, default=True)
    rating = Column(Float, nullable=False, default=0.0)
    total_jobs = Column(Integer, nullable=False, default=0)
    specialties = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def is_staff(self) -> bool:
        return self.role in (UserRole.WORKER.value, UserRole.ADMIN.value)

    @property
    def worker_details(self) -> dict | None:
        if self.role != UserRole.WORKER.value:
            return None
        return {
            "is_available": self.is_available,
            "rating": self.rating,
            "total_jobs": self.total_jobs,
            "specialties": self.specialties or [],
        }

    def __repr__(self):
        return f"<User {self.id} {self.role} {self.phone or self.email}>"

"""Saved customer address: maps to the 'addresses' table."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float, ForeignKey, Index
from sqlalchemy.sql import func

from caarvo.infrastructure.database import Base


class Address(Base):
    __tablename__ = "addresses"
    __table_args__ = (
        Index("ix_addresses_owner_active", "owner_id", "is_active"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    street = Column(String(300), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    zip_code = Column(String(20), nullable=False)
    country = Column(String(100), nullable=False, default="India")
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)
    is_default = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    nickname = Column(String(50), nullable=True)
    notes = Column(String(200), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def coordinates(self) -> dict | None:
        if self.lat is None and self.lng is None:
            return None
        return {"lat": self.lat, "lng": self.lng}

    def __repr__(self):
        return f"<Address {self.id} owner={self.owner_id} default={self.is_default}>"

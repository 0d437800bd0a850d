"""One-time passcodes issued for phone login."""

import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Index

from caarvo.core.clock import utcnow
from caarvo.infrastructure.database import Base


class DeliveryStatus(str, enum.Enum):
    SENT = "sent"
    NOT_CONFIGURED = "not_configured"
    FAILED = "failed"


class OTP(Base):
    __tablename__ = "otps"
    __table_args__ = (
        Index("ix_otps_phone_created", "phone", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    phone = Column(String(20), nullable=False)
    code = Column(String(10), nullable=False)
    # Python-side default keeps sub-second precision for resend/expiry comparisons
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    verified = Column(Boolean, nullable=False, default=False)
    delivery_status = Column(String(20), nullable=True)

    def __repr__(self):
        return f"<OTP {self.phone} verified={self.verified}>"

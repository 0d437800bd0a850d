"""OTP service: issue, deliver, consume and purge phone login codes."""

import secrets
from datetime import timedelta
from typing import Optional

import structlog
from sqlalchemy.orm import Session

from caarvo.application.services.auth_service import (
    create_access_token,
    ensure_active,
    find_or_create_by_phone,
)
from caarvo.config import get_settings
from caarvo.core.clock import as_utc, utcnow
from caarvo.core.exceptions import (
    ExternalServiceException,
    InvalidOrExpiredOTPException,
    RateLimitException,
    ValidationException,
)
from caarvo.domain.models.otp import OTP, DeliveryStatus
from caarvo.domain.models.user import User

settings = get_settings()
logger = structlog.get_logger(__name__)

DELIVERY_MESSAGES = {
    DeliveryStatus.SENT: "OTP sent successfully via SMS",
    DeliveryStatus.NOT_CONFIGURED: "OTP generated but SMS delivery is not configured",
    DeliveryStatus.FAILED: "OTP generated but SMS delivery failed",
}


def generate_code(length: int) -> str:
    return "".join(secrets.choice("0123456789") for _ in range(length))


def _ttl() -> timedelta:
    return timedelta(seconds=settings.OTP_TTL_SECONDS)


async def issue_otp(db: Session, phone: str, sms_client) -> tuple[str, dict]:
    """Persist a fresh code and try to deliver it.

    Returns ``(message, data)``. Persisting and delivering are reported
    separately: ``data["delivery"]`` is one of sent / not_configured / failed.
    """
    now = utcnow()
    latest = (
        db.query(OTP)
        .filter(OTP.phone == phone)
        .order_by(OTP.created_at.desc(), OTP.id.desc())
        .first()
    )
    if latest:
        elapsed = (now - as_utc(latest.created_at)).total_seconds()
        if elapsed < settings.OTP_RESEND_SECONDS:
            retry_after = int(settings.OTP_RESEND_SECONDS - elapsed) + 1
            raise RateLimitException(
                "Please wait before requesting another OTP",
                details={"retryAfter": retry_after},
            )

    code = generate_code(settings.OTP_LENGTH)
    otp = OTP(phone=phone, code=code, created_at=now)
    db.add(otp)
    db.commit()

    if not sms_client.is_configured:
        delivery = DeliveryStatus.NOT_CONFIGURED
        logger.warning("OTP delivery skipped, SMS provider not configured", phone=phone)
    else:
        try:
            await sms_client.send_otp(phone, code)
            delivery = DeliveryStatus.SENT
        except ExternalServiceException as e:
            delivery = DeliveryStatus.FAILED
            logger.warning("OTP delivery failed", phone=phone, error=e.message)

    otp.delivery_status = delivery.value
    db.commit()
    logger.info("OTP issued", phone=phone, delivery=delivery.value)

    data = {
        "phone": phone,
        "expiresIn": settings.OTP_TTL_SECONDS,
        "delivery": delivery.value,
    }
    if settings.is_development and delivery != DeliveryStatus.SENT:
        data["devOtp"] = code
        logger.info("Development OTP", phone=phone, otp=code)
    return DELIVERY_MESSAGES[delivery], data


def consume_otp(db: Session, phone: str, code: str) -> OTP:
    """Mark the newest matching unexpired code as used.

    The flip is conditional on ``verified`` still being false, so a code is
    accepted at most once even when two requests race for it.
    """
    cutoff = utcnow() - _ttl()
    otp = (
        db.query(OTP)
        .filter(
            OTP.phone == phone,
            OTP.code == code,
            OTP.verified.is_(False),
            OTP.created_at > cutoff,
        )
        .order_by(OTP.created_at.desc(), OTP.id.desc())
        .first()
    )
    if not otp:
        raise InvalidOrExpiredOTPException()

    claimed = (
        db.query(OTP)
        .filter(OTP.id == otp.id, OTP.verified.is_(False))
        .update({OTP.verified: True}, synchronize_session=False)
    )
    if claimed != 1:
        db.rollback()
        raise InvalidOrExpiredOTPException()
    db.commit()
    return otp


async def login_with_otp(
    db: Session,
    phone: str,
    code: str,
    sms_client,
    access_token: Optional[str] = None,
) -> tuple[User, str]:
    """Verify a phone login and issue a session token for the (possibly new) customer."""
    if access_token and sms_client.is_configured:
        try:
            mobile = await sms_client.verify_access_token(access_token)
        except ExternalServiceException:
            raise ValidationException("Invalid access token verification")
        if mobile and mobile != phone[3:]:
            raise ValidationException("Phone number mismatch with verified token")

    consume_otp(db, phone, code)
    user = ensure_active(find_or_create_by_phone(db, phone))
    logger.info("Phone login", user_id=user.id)
    return user, create_access_token(user)


def purge_expired(db: Session) -> int:
    cutoff = utcnow() - _ttl()
    deleted = (
        db.query(OTP)
        .filter(OTP.created_at <= cutoff)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted

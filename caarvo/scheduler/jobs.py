"""APScheduler jobs: expired OTP purge."""

import pytz
import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from caarvo.config import get_settings
from caarvo.infrastructure.database import SessionLocal

settings = get_settings()
logger = structlog.get_logger(__name__)
tz = pytz.timezone(settings.TIMEZONE)

scheduler = AsyncIOScheduler(timezone=tz)


async def purge_expired_otps_job():
    """Periodic job: delete OTP rows older than their validity window."""
    from caarvo.application.services.otp_service import purge_expired

    db = SessionLocal()
    try:
        deleted = purge_expired(db)
        if deleted:
            logger.info("Expired OTPs purged", deleted=deleted)
    except Exception:
        db.rollback()
        logger.exception("OTP purge job failed")
    finally:
        db.close()


def start_scheduler():
    scheduler.add_job(
        purge_expired_otps_job,
        trigger=IntervalTrigger(minutes=settings.OTP_CLEANUP_INTERVAL_MINUTES, timezone=tz),
        id="purge_expired_otps",
        name=f"Purge expired OTPs (every {settings.OTP_CLEANUP_INTERVAL_MINUTES} mins)",
        replace_existing=True,
    )
    scheduler.start()
    logger.info("Scheduler started", otp_cleanup_minutes=settings.OTP_CLEANUP_INTERVAL_MINUTES)


def stop_scheduler():
    """Stop the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")

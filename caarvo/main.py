"""FastAPI application: main entry point."""

import structlog
from contextlib import asynccontextmanager

from fastapi import FastAPI

from caarvo.config import get_settings
from caarvo.infrastructure.database import engine, Base, SessionLocal
from caarvo.core.logging import configure_logging
from caarvo.core.middleware import setup_middleware
from caarvo.core.exceptions import register_exception_handlers

# Import all models so SQLAlchemy knows about them
from caarvo.domain.models.user import User  # noqa: F401
from caarvo.domain.models.vehicle import Vehicle  # noqa: F401
from caarvo.domain.models.address import Address  # noqa: F401
from caarvo.domain.models.booking import Booking  # noqa: F401
from caarvo.domain.models.otp import OTP  # noqa: F401

# Import routers
from caarvo.interfaces.api.auth import router as auth_router
from caarvo.interfaces.api.users import router as users_router
from caarvo.interfaces.api.vehicles import router as vehicles_router
from caarvo.interfaces.api.addresses import router as addresses_router
from caarvo.interfaces.api.bookings import router as bookings_router
from caarvo.interfaces.api.admin import router as admin_router
from caarvo.interfaces.api.payments import router as payments_router

settings = get_settings()

configure_logging()
logger = structlog.get_logger(__name__)

API_VERSION = "1.0.0"
HEALTH_MESSAGE = "Vehicle Cleaning Service API is running"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    logger.info("Starting Caarvo API", env=settings.ENVIRONMENT)

    # Create DB tables (use migrations for schema changes in production)
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    from caarvo.application.services.auth_service import ensure_default_admin
    db = SessionLocal()
    try:
        ensure_default_admin(db)
    finally:
        db.close()

    if settings.SCHEDULER_ENABLED:
        from caarvo.scheduler.jobs import start_scheduler
        start_scheduler()

    yield

    if settings.SCHEDULER_ENABLED:
        from caarvo.scheduler.jobs import stop_scheduler
        stop_scheduler()
    logger.info("Caarvo API stopped")


app = FastAPI(
    title="Caarvo Vehicle Cleaning API",
    description="Bookings, OTP login, vehicles, addresses, admin analytics and Razorpay payments",
    version=API_VERSION,
    lifespan=lifespan,
)

# Setup Middleware (request logging, CORS, correlation id)
setup_middleware(app)

# Envelope-shaped error responses
register_exception_handlers(app)

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(vehicles_router)
app.include_router(addresses_router)
app.include_router(bookings_router)
app.include_router(admin_router)
app.include_router(payments_router)


@app.get("/")
def root():
    return {
        "name": "Caarvo Vehicle Cleaning API",
        "version": API_VERSION,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
@app.get("/api/health")
def health():
    return {"status": "OK", "message": HEALTH_MESSAGE}

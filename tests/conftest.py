"""Shared test fixtures: in-memory database, API client and fake providers."""

import os

# Must be set before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "test_secret"
os.environ["MSG91_API_KEY"] = ""
os.environ["DEFAULT_ADMIN_EMAIL"] = ""

from typing import Optional

import pytest
from fastapi.testclient import TestClient

from caarvo.application.services import otp_service
from caarvo.core.exceptions import ExternalServiceException
from caarvo.infrastructure.database import Base, SessionLocal, engine
from caarvo.interfaces.deps import get_payment_gateway, get_sms_client
from caarvo.main import app
from tests.factories import TEST_OTP


class FakeSmsClient:
    """Stands in for the MSG91 client and records what would have been sent."""

    def __init__(self, configured: bool = True, fail: bool = False, verified_mobile: Optional[str] = None):
        self.configured = configured
        self.fail = fail
        self.verified_mobile = verified_mobile
        self.sent: list[tuple[str, str]] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def send_otp(self, phone: str, code: str) -> dict:
        if self.fail:
            raise ExternalServiceException("SMS delivery failed")
        self.sent.append((phone, code))
        return {"type": "success"}

    async def verify_access_token(self, access_token: str) -> Optional[str]:
        if access_token == "bad-token":
            raise ExternalServiceException("Access token verification failed")
        return self.verified_mobile


class FakePaymentGateway:
    key_id = "rzp_test_key"

    def __init__(self, configured: bool = True):
        self.configured = configured
        self.orders: list[dict] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def create_order(self, amount: int, currency: str, receipt: str, notes=None) -> dict:
        order = {
            "id": f"order_test_{len(self.orders) + 1}",
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": notes or {},
        }
        self.orders.append(order)
        return order


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def sms_client():
    return FakeSmsClient()


@pytest.fixture
def payment_gateway():
    return FakePaymentGateway()


@pytest.fixture
def client(db, sms_client, payment_gateway):
    app.dependency_overrides[get_sms_client] = lambda: sms_client
    app.dependency_overrides[get_payment_gateway] = lambda: payment_gateway
    # No context manager: startup (table creation, scheduler) is skipped
    test_client = TestClient(app)
    try:
        yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def fixed_otp(monkeypatch):
    monkeypatch.setattr(otp_service, "generate_code", lambda length: TEST_OTP)
    return TEST_OTP

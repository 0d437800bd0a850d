"""Tests for phone OTP issue, verification and purge."""

from datetime import timedelta

from caarvo.application.services import otp_service
from caarvo.core.clock import utcnow
from caarvo.domain.models.otp import OTP
from caarvo.domain.models.user import User
from tests.factories import make_customer

PHONE = "+919876543210"


def _send(client, phone: str = PHONE):
    return client.post("/api/auth/send-otp", json={"phone": phone})


def _verify(client, otp: str, phone: str = PHONE, **extra):
    return client.post("/api/auth/verify-otp", json={"phone": phone, "otp": otp, **extra})


class TestSendOtp:
    def test_sends_code_via_sms(self, client, sms_client, fixed_otp):
        resp = _send(client)
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "OTP sent successfully via SMS"
        assert body["data"]["delivery"] == "sent"
        assert body["data"]["expiresIn"] == 300
        assert "devOtp" not in body["data"]
        assert sms_client.sent == [(PHONE, fixed_otp)]

    def test_resend_within_cooldown_is_rate_limited(self, client, fixed_otp):
        assert _send(client).status_code == 200
        resp = _send(client)
        assert resp.status_code == 429
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == "RateLimited"
        assert 0 < body["details"]["retryAfter"] <= 60

    def test_other_phone_is_not_rate_limited(self, client, fixed_otp):
        assert _send(client).status_code == 200
        assert _send(client, "+919812345678").status_code == 200

    def test_unconfigured_provider_still_persists_code(self, client, db, sms_client, fixed_otp):
        sms_client.configured = False
        resp = _send(client)
        assert resp.status_code == 200
        assert resp.json()["data"]["delivery"] == "not_configured"
        assert sms_client.sent == []
        stored = db.query(OTP).filter(OTP.phone == PHONE).one()
        assert stored.code == fixed_otp
        assert stored.delivery_status == "not_configured"

    def test_failed_delivery_is_reported(self, client, sms_client, fixed_otp):
        sms_client.fail = True
        resp = _send(client)
        assert resp.status_code == 200
        assert resp.json()["data"]["delivery"] == "failed"
        assert resp.json()["message"] == "OTP generated but SMS delivery failed"

    def test_development_exposes_undelivered_code(self, client, sms_client, fixed_otp, monkeypatch):
        monkeypatch.setattr(otp_service.settings, "ENVIRONMENT", "development")
        sms_client.configured = False
        resp = _send(client)
        assert resp.json()["data"]["devOtp"] == fixed_otp

    def test_invalid_phone_rejected(self, client):
        for phone in ("9876543210", "+915876543210", "+91987654321", "+1 2025550123"):
            resp = _send(client, phone)
            assert resp.status_code == 400, phone
            assert resp.json()["success"] is False


class TestVerifyOtp:
    def test_first_login_creates_customer(self, client, db, fixed_otp):
        _send(client)
        resp = _verify(client, fixed_otp)
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["token"]
        assert data["user"]["phone"] == PHONE
        assert data["user"]["role"] == "user"
        assert data["user"]["name"] == "Customer"
        assert data["user"]["email"] is None
        assert db.query(User).filter(User.phone == PHONE).count() == 1

    def test_code_is_accepted_only_once(self, client, fixed_otp):
        _send(client)
        assert _verify(client, fixed_otp).status_code == 200
        resp = _verify(client, fixed_otp)
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid or expired OTP"
        assert resp.json()["error"] == "InvalidOrExpiredOTP"

    def test_wrong_code_rejected(self, client, fixed_otp):
        _send(client)
        resp = _verify(client, "654321")
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid or expired OTP"

    def test_expired_code_rejected(self, client, db):
        db.add(OTP(phone=PHONE, code="111111", created_at=utcnow() - timedelta(minutes=10)))
        db.commit()
        assert _verify(client, "111111").status_code == 400

    def test_existing_customer_is_reused(self, client, db, fixed_otp):
        customer = make_customer(db, name="Asha", phone=PHONE)
        _send(client)
        resp = _verify(client, fixed_otp)
        assert resp.json()["data"]["user"]["id"] == customer.id
        assert resp.json()["data"]["user"]["name"] == "Asha"
        assert db.query(User).count() == 1

    def test_deactivated_account_rejected(self, client, db, fixed_otp):
        customer = make_customer(db, phone=PHONE)
        customer.is_active = False
        db.commit()
        _send(client)
        assert _verify(client, fixed_otp).status_code == 401

    def test_token_authenticates_follow_up_requests(self, client, fixed_otp):
        _send(client)
        token = _verify(client, fixed_otp).json()["data"]["token"]
        resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 200
        assert resp.json()["data"]["phone"] == PHONE

    def test_access_token_for_other_number_rejected(self, client, sms_client, fixed_otp):
        sms_client.verified_mobile = "9123456789"
        _send(client)
        resp = _verify(client, fixed_otp, accessToken="widget-token")
        assert resp.status_code == 400
        assert resp.json()["message"] == "Phone number mismatch with verified token"

    def test_access_token_for_same_number_accepted(self, client, sms_client, fixed_otp):
        sms_client.verified_mobile = "9876543210"
        _send(client)
        assert _verify(client, fixed_otp, accessToken="widget-token").status_code == 200

    def test_failed_access_token_check_rejected(self, client, fixed_otp):
        _send(client)
        resp = _verify(client, fixed_otp, accessToken="bad-token")
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid access token verification"


class TestLoginPhone:
    def test_login_phone_consumes_the_same_code(self, client, fixed_otp):
        _send(client)
        resp = client.post("/api/auth/login-phone", json={"phone": PHONE, "otp": fixed_otp})
        assert resp.status_code == 200
        assert resp.json()["message"] == "Login successful"
        assert _verify(client, fixed_otp).status_code == 400


class TestPurgeExpired:
    def test_removes_only_expired_rows(self, db):
        db.add(OTP(phone=PHONE, code="111111", created_at=utcnow() - timedelta(minutes=10)))
        db.add(OTP(phone=PHONE, code="222222", created_at=utcnow()))
        db.commit()
        assert otp_service.purge_expired(db) == 1
        assert [o.code for o in db.query(OTP).all()] == ["222222"]

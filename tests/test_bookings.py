"""Tests for booking creation and the customer and worker lifecycle routes."""

from datetime import timedelta

from caarvo.domain.models.booking import Booking
from tests.factories import (
    auth_headers,
    booking_payload,
    make_admin,
    make_booking,
    make_customer,
    make_vehicle,
    make_worker,
)


class TestCreateBooking:
    def test_create_booking(self, client, db):
        customer = make_customer(db)
        vehicle = make_vehicle(db, customer)
        resp = client.post("/api/bookings", json=booking_payload(vehicle.id), headers=auth_headers(customer))
        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["status"] == "pending"
        assert data["paymentStatus"] == "pending"
        assert data["workerId"] is None
        assert data["notes"] == {"customer": "Please bring your own water", "worker": None}
        assert data["location"]["zipCode"] == "411001"
        assert data["vehicle"]["licensePlate"] == "MH12AB1234"
        assert data["isPast"] is False
        assert data["canBeCancelled"] is True

    def test_past_date_rejected(self, client, db):
        customer = make_customer(db)
        vehicle = make_vehicle(db, customer)
        resp = client.post(
            "/api/bookings",
            json=booking_payload(vehicle.id, scheduled_in=-timedelta(hours=1)),
            headers=auth_headers(customer),
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Scheduled date must be in the future"

    def test_someone_elses_vehicle_not_found(self, client, db):
        vehicle = make_vehicle(db, make_customer(db))
        customer = make_customer(db)
        resp = client.post("/api/bookings", json=booking_payload(vehicle.id), headers=auth_headers(customer))
        assert resp.status_code == 404
        assert resp.json()["message"] == "Vehicle not found"

    def test_workers_cannot_book(self, client, db):
        worker = make_worker(db)
        resp = client.post("/api/bookings", json=booking_payload(1), headers=auth_headers(worker))
        assert resp.status_code == 403

    def test_unknown_service_type_rejected(self, client, db):
        customer = make_customer(db)
        vehicle = make_vehicle(db, customer)
        payload = {**booking_payload(vehicle.id), "serviceType": "polish"}
        resp = client.post("/api/bookings", json=payload, headers=auth_headers(customer))
        assert resp.status_code == 400


class TestReadBookings:
    def test_customer_sees_own_bookings_newest_first(self, client, db):
        customer = make_customer(db)
        vehicle = make_vehicle(db, customer)
        soon = make_booking(db, customer, vehicle, scheduled_in=timedelta(days=1))
        later = make_booking(db, customer, vehicle, scheduled_in=timedelta(days=3))
        other = make_customer(db)
        make_booking(db, other, make_vehicle(db, other))

        resp = client.get("/api/bookings", headers=auth_headers(customer))
        assert resp.json()["count"] == 2
        assert [b["id"] for b in resp.json()["data"]] == [later.id, soon.id]

    def test_worker_sees_assigned_bookings(self, client, db):
        customer = make_customer(db)
        vehicle = make_vehicle(db, customer)
        worker = make_worker(db)
        assigned = make_booking(db, customer, vehicle, status="assigned", worker=worker)
        make_booking(db, customer, vehicle)

        resp = client.get("/api/bookings", headers=auth_headers(worker))
        assert [b["id"] for b in resp.json()["data"]] == [assigned.id]

    def test_unrelated_customer_gets_not_found(self, client, db):
        customer = make_customer(db)
        booking = make_booking(db, customer, make_vehicle(db, customer))
        resp = client.get(f"/api/bookings/{booking.id}", headers=auth_headers(make_customer(db)))
        assert resp.status_code == 404

    def test_admin_can_read_any_booking(self, client, db):
        customer = make_customer(db)
        booking = make_booking(db, customer, make_vehicle(db, customer))
        resp = client.get(f"/api/bookings/{booking.id}", headers=auth_headers(make_admin(db)))
        assert resp.status_code == 200
        assert resp.json()["data"]["customer"]["id"] == customer.id


class TestWorkerStatus:
    def _assigned(self, db, status="assigned"):
        customer = make_customer(db)
        worker = make_worker(db)
        booking = make_booking(db, customer, make_vehicle(db, customer), status=status, worker=worker)
        return booking, worker

    def test_worker_walks_the_lifecycle(self, client, db):
        booking, worker = self._assigned(db)
        headers = auth_headers(worker)
        for status in ("en-route", "in-progress", "completed"):
            resp = client.put(f"/api/bookings/{booking.id}/status", json={"status": status}, headers=headers)
            assert resp.status_code == 200, resp.json()
            assert resp.json()["data"]["status"] == status
        assert resp.json()["data"]["completedAt"] is not None
        db.refresh(worker)
        assert worker.total_jobs == 1

    def test_status_endpoint_cannot_skip_to_completed(self, client, db):
        booking, worker = self._assigned(db)
        resp = client.put(
            f"/api/bookings/{booking.id}/status", json={"status": "completed"}, headers=auth_headers(worker)
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "InvalidTransition"

    def test_worker_cannot_cancel_through_status(self, client, db):
        booking, worker = self._assigned(db)
        resp = client.put(
            f"/api/bookings/{booking.id}/status", json={"status": "cancelled"}, headers=auth_headers(worker)
        )
        assert resp.status_code == 400

    def test_worker_notes_are_recorded(self, client, db):
        booking, worker = self._assigned(db)
        resp = client.put(
            f"/api/bookings/{booking.id}/status",
            json={"status": "en-route", "notes": "Leaving now"},
            headers=auth_headers(worker),
        )
        assert resp.json()["data"]["notes"]["worker"] == "Leaving now"

    def test_other_worker_gets_not_found(self, client, db):
        booking, _ = self._assigned(db)
        resp = client.put(
            f"/api/bookings/{booking.id}/status",
            json={"status": "en-route"},
            headers=auth_headers(make_worker(db)),
        )
        assert resp.status_code == 404

    def test_complete_shortcut_from_assigned(self, client, db):
        booking, worker = self._assigned(db)
        resp = client.put(f"/api/bookings/{booking.id}/complete", headers=auth_headers(worker))
        assert resp.status_code == 200
        assert resp.json()["data"]["status"] == "completed"

    def test_complete_rejected_once_cancelled(self, client, db):
        booking, worker = self._assigned(db, status="cancelled")
        resp = client.put(f"/api/bookings/{booking.id}/complete", headers=auth_headers(worker))
        assert resp.status_code == 400


class TestCancelBooking:
    def test_cancel_outside_window(self, client, db):
        customer = make_customer(db)
        booking = make_booking(db, customer, make_vehicle(db, customer))
        resp = client.put(
            f"/api/bookings/{booking.id}/cancel",
            json={"reason": "Plans changed"},
            headers=auth_headers(customer),
        )
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["status"] == "cancelled"
        assert data["cancelledBy"] == "customer"
        assert data["cancellationReason"] == "Plans changed"
        assert data["cancelledAt"] is not None

    def test_cancel_without_body(self, client, db):
        customer = make_customer(db)
        booking = make_booking(db, customer, make_vehicle(db, customer))
        resp = client.put(f"/api/bookings/{booking.id}/cancel", headers=auth_headers(customer))
        assert resp.status_code == 200

    def test_cancel_inside_window_rejected(self, client, db):
        customer = make_customer(db)
        booking = make_booking(db, customer, make_vehicle(db, customer), scheduled_in=timedelta(hours=1))
        resp = client.put(f"/api/bookings/{booking.id}/cancel", headers=auth_headers(customer))
        assert resp.status_code == 400
        db.refresh(booking)
        assert booking.status == "pending"

    def test_assigned_booking_cannot_be_cancelled_by_customer(self, client, db):
        customer = make_customer(db)
        booking = make_booking(
            db, customer, make_vehicle(db, customer), status="assigned", worker=make_worker(db)
        )
        resp = client.put(f"/api/bookings/{booking.id}/cancel", headers=auth_headers(customer))
        assert resp.status_code == 400

    def test_admin_uses_admin_routes(self, client, db):
        customer = make_customer(db)
        booking = make_booking(db, customer, make_vehicle(db, customer))
        resp = client.put(f"/api/bookings/{booking.id}/cancel", headers=auth_headers(make_admin(db)))
        assert resp.status_code == 403


class TestReviewBooking:
    def _completed(self, db):
        customer = make_customer(db)
        worker = make_worker(db)
        booking = make_booking(
            db, customer, make_vehicle(db, customer), status="completed", worker=worker
        )
        return booking, customer, worker

    def test_review_updates_worker_rating(self, client, db):
        booking, customer, worker = self._completed(db)
        second = make_booking(
            db, customer, make_vehicle(db, customer, license_plate="MH12ZZ9999"),
            status="completed", worker=worker,
        )
        headers = auth_headers(customer)
        client.put(f"/api/bookings/{booking.id}/review", json={"rating": 5, "review": "Spotless"}, headers=headers)
        resp = client.put(f"/api/bookings/{second.id}/review", json={"rating": 4}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["data"]["rating"] == 4
        db.refresh(worker)
        assert worker.rating == 4.5

    def test_review_twice_rejected(self, client, db):
        booking, customer, _ = self._completed(db)
        headers = auth_headers(customer)
        client.put(f"/api/bookings/{booking.id}/review", json={"rating": 5}, headers=headers)
        resp = client.put(f"/api/bookings/{booking.id}/review", json={"rating": 1}, headers=headers)
        assert resp.status_code == 400
        assert resp.json()["message"] == "Booking already reviewed"

    def test_review_before_completion_rejected(self, client, db):
        customer = make_customer(db)
        booking = make_booking(db, customer, make_vehicle(db, customer))
        resp = client.put(f"/api/bookings/{booking.id}/review", json={"rating": 5}, headers=auth_headers(customer))
        assert resp.status_code == 400
        assert resp.json()["message"] == "Can only review completed bookings"

    def test_rating_out_of_range_rejected(self, client, db):
        booking, customer, _ = self._completed(db)
        resp = client.put(f"/api/bookings/{booking.id}/review", json={"rating": 6}, headers=auth_headers(customer))
        assert resp.status_code == 400
        db.expire_all()
        assert db.get(Booking, booking.id).rating is None

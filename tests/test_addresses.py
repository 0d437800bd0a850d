"""Tests for saved addresses and the single-default rule."""

from caarvo.domain.models.address import Address
from tests.factories import auth_headers, make_customer


def _address(street: str, **extra) -> dict:
    return {"street": street, "city": "Pune", "state": "Maharashtra", "zipCode": "411001", **extra}


def _defaults(db, owner_id: int) -> list[int]:
    db.expire_all()
    return [
        a.id
        for a in db.query(Address).filter(
            Address.owner_id == owner_id, Address.is_default.is_(True)
        )
    ]


class TestCreateAddress:
    def test_create_with_coordinates(self, client, db):
        customer = make_customer(db)
        resp = client.post(
            "/api/addresses",
            json=_address("12 MG Road", coordinates={"lat": 18.52, "lng": 73.85}, nickname="Home"),
            headers=auth_headers(customer),
        )
        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["coordinates"] == {"lat": 18.52, "lng": 73.85}
        assert data["country"] == "India"
        assert data["isDefault"] is False

    def test_invalid_coordinates_rejected(self, client, db):
        customer = make_customer(db)
        resp = client.post(
            "/api/addresses",
            json=_address("12 MG Road", coordinates={"lat": 123, "lng": 73.85}),
            headers=auth_headers(customer),
        )
        assert resp.status_code == 400

    def test_new_default_replaces_old_default(self, client, db):
        customer = make_customer(db)
        headers = auth_headers(customer)
        client.post("/api/addresses", json=_address("Home", isDefault=True), headers=headers)
        second = client.post("/api/addresses", json=_address("Office", isDefault=True), headers=headers)
        assert _defaults(db, customer.id) == [second.json()["data"]["id"]]


class TestDefaultAddress:
    def test_no_default_is_not_found(self, client, db):
        customer = make_customer(db)
        resp = client.get("/api/addresses/default", headers=auth_headers(customer))
        assert resp.status_code == 404
        assert resp.json()["message"] == "No default address found"

    def test_set_default(self, client, db):
        customer = make_customer(db)
        headers = auth_headers(customer)
        first = client.post("/api/addresses", json=_address("Home", isDefault=True), headers=headers)
        second = client.post("/api/addresses", json=_address("Office"), headers=headers)
        second_id = second.json()["data"]["id"]

        resp = client.put(f"/api/addresses/{second_id}/default", headers=headers)
        assert resp.status_code == 200
        assert _defaults(db, customer.id) == [second_id]

        default = client.get("/api/addresses/default", headers=headers)
        assert default.json()["data"]["id"] == second_id
        assert first.json()["data"]["id"] != second_id

    def test_update_to_default_clears_siblings(self, client, db):
        customer = make_customer(db)
        headers = auth_headers(customer)
        client.post("/api/addresses", json=_address("Home", isDefault=True), headers=headers)
        office = client.post("/api/addresses", json=_address("Office"), headers=headers).json()["data"]
        client.put(f"/api/addresses/{office['id']}", json={"isDefault": True}, headers=headers)
        assert _defaults(db, customer.id) == [office["id"]]

    def test_null_required_field_rejected(self, client, db):
        customer = make_customer(db)
        headers = auth_headers(customer)
        home = client.post("/api/addresses", json=_address("Home"), headers=headers).json()["data"]
        resp = client.put(f"/api/addresses/{home['id']}", json={"street": None}, headers=headers)
        assert resp.status_code == 400
        assert resp.json()["error"] == "ValidationError"
        assert client.get(f"/api/addresses/{home['id']}", headers=headers).json()["data"]["street"] == "Home"

    def test_null_nickname_clears_it(self, client, db):
        customer = make_customer(db)
        headers = auth_headers(customer)
        home = client.post("/api/addresses", json=_address("Home", nickname="Home"), headers=headers).json()["data"]
        resp = client.put(f"/api/addresses/{home['id']}", json={"nickname": None}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["data"]["nickname"] is None

    def test_default_listed_first(self, client, db):
        customer = make_customer(db)
        headers = auth_headers(customer)
        home = client.post("/api/addresses", json=_address("Home", isDefault=True), headers=headers).json()["data"]
        client.post("/api/addresses", json=_address("Office"), headers=headers)
        resp = client.get("/api/addresses", headers=headers)
        assert resp.json()["count"] == 2
        assert resp.json()["data"][0]["id"] == home["id"]


class TestDeleteAddress:
    def test_only_default_cannot_be_deleted(self, client, db):
        customer = make_customer(db)
        headers = auth_headers(customer)
        home = client.post("/api/addresses", json=_address("Home", isDefault=True), headers=headers).json()["data"]
        resp = client.delete(f"/api/addresses/{home['id']}", headers=headers)
        assert resp.status_code == 400
        assert resp.json()["message"] == "Cannot delete the only address. Please add another address first."

    def test_deleting_default_promotes_another(self, client, db):
        customer = make_customer(db)
        headers = auth_headers(customer)
        home = client.post("/api/addresses", json=_address("Home", isDefault=True), headers=headers).json()["data"]
        office = client.post("/api/addresses", json=_address("Office"), headers=headers).json()["data"]

        resp = client.delete(f"/api/addresses/{home['id']}", headers=headers)
        assert resp.status_code == 200
        assert _defaults(db, customer.id) == [office["id"]]
        assert client.get(f"/api/addresses/{home['id']}", headers=headers).status_code == 404

    def test_other_owner_cannot_delete(self, client, db):
        owner = make_customer(db)
        home = client.post(
            "/api/addresses", json=_address("Home"), headers=auth_headers(owner)
        ).json()["data"]
        resp = client.delete(f"/api/addresses/{home['id']}", headers=auth_headers(make_customer(db)))
        assert resp.status_code == 404

"""
API Tests

Tests for the HTTP endpoints through the Flask test client.
"""

import json

import pytest

from models import db
from models.audit_log import AuditLog
from models.experience import Slot
from models.promo_code import PromoCode


# =============================================================================
# Health / Experiences
# =============================================================================

class TestExperienceEndpoints:

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.headers["X-Content-Type-Options"] == "nosniff"

    def test_list_experiences(self, client, hiking, cheap_tour):
        resp = client.get("/experiences")

        assert resp.status_code == 200
        assert [e["title"] for e in resp.get_json()] == ["Mountain Hiking Adventure", "Harbour Walk"]

    def test_filter_by_location(self, client, hiking, cheap_tour):
        resp = client.get("/experiences?location=sydney")
        assert [e["title"] for e in resp.get_json()] == ["Harbour Walk"]

    def test_get_experience_with_slots(self, client, hiking):
        body = client.get(f"/experiences/{hiking.id}").get_json()

        assert body["price"] == 149.0
        assert body["amenities"] == ["Guide", "Equipment", "Lunch", "Photos"]
        assert body["slots"][0] == {
            "id": hiking.slots[0].id,
            "date": "2025-11-15",
            "time": "08:00 AM",
            "available": 10,
            "booked": 0,
            "remaining": 10,
        }

    def test_get_missing_experience(self, client):
        resp = client.get("/experiences/404")

        assert resp.status_code == 404
        assert resp.get_json()["code"] == "EXPERIENCE_NOT_FOUND"

    def test_cors_for_allowed_origin(self, client):
        resp = client.get("/health", headers={"Origin": "http://localhost:3000"})
        assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:3000"

        resp = client.get("/health", headers={"Origin": "http://evil.example"})
        assert "Access-Control-Allow-Origin" not in resp.headers

    def test_cors_preflight(self, client):
        resp = client.options("/bookings", headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Authorization",
        })

        assert resp.status_code == 200
        assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:3000"
        assert "authorization" in resp.headers["Access-Control-Allow-Headers"].lower()
        assert "POST" in resp.headers["Access-Control-Allow-Methods"]


# =============================================================================
# Promo
# =============================================================================

class TestPromoEndpoint:

    def test_valid_code(self, client, promos):
        resp = client.post("/promo/validate", json={"code": "save10", "amount": 100})

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["discount"] == 10.0
        assert body["discount_type"] == "percentage"
        assert body["discount_value"] == 10.0

    def test_missing_code(self, client, promos):
        resp = client.post("/promo/validate", json={"amount": 100})

        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Promo code is required"

    def test_missing_amount(self, client, promos):
        resp = client.post("/promo/validate", json={"code": "SAVE10"})
        assert resp.status_code == 400

    def test_unknown_code(self, client, promos):
        resp = client.post("/promo/validate", json={"code": "NOPE", "amount": 100})

        assert resp.status_code == 404
        assert AuditLog.query.filter_by(action="PROMO_VALIDATE_FAIL").count() == 1

    @pytest.mark.parametrize("body", [["SAVE10", 100], "SAVE10", 100])
    def test_body_must_be_an_object(self, client, promos, body):
        resp = client.post("/promo/validate", json=body)

        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Request body must be a JSON object"

    def test_inactive_expired_and_exhausted(self, client, promos):
        for code, error in [("OFFLINE", "PROMO_INACTIVE"),
                            ("OLD", "PROMO_EXPIRED"),
                            ("USEDUP", "PROMO_USAGE_LIMIT_REACHED")]:
            resp = client.post("/promo/validate", json={"code": code, "amount": 100})
            assert resp.status_code == 400
            assert resp.get_json()["code"] == error


# =============================================================================
# Auth
# =============================================================================

class TestAuthEndpoints:

    def test_register_login_me_logout(self, client):
        resp = client.post("/auth/register", json={
            "email": "Jo@Example.com", "password": "long-enough-pw", "full_name": "Jo",
        })
        assert resp.status_code == 201

        resp = client.post("/auth/login", json={"email": "jo@example.com", "password": "long-enough-pw"})
        assert resp.status_code == 200
        headers = {"Authorization": f"Bearer {resp.get_json()['token']}"}

        me = client.get("/auth/me", headers=headers)
        assert me.status_code == 200
        assert me.get_json()["email"] == "jo@example.com"

        assert client.post("/auth/logout", headers=headers).status_code == 200
        assert client.get("/auth/me", headers=headers).status_code == 401

    def test_duplicate_email(self, client, auth_headers):
        resp = client.post("/auth/register", json={
            "email": "alex@example.com", "password": "long-enough-pw", "full_name": "Alex",
        })
        assert resp.status_code == 409

    def test_short_password(self, client):
        resp = client.post("/auth/register", json={
            "email": "a@example.com", "password": "short", "full_name": "A",
        })
        assert resp.status_code == 400

    def test_wrong_password(self, client, auth_headers):
        resp = client.post("/auth/login", json={"email": "alex@example.com", "password": "wrong-password"})
        assert resp.status_code == 401

    def test_garbage_token(self, client):
        resp = client.get("/auth/me", headers={"Authorization": "Bearer nope"})

        assert resp.status_code == 401
        assert resp.get_json()["code"] == "AUTH_REQUIRED"


# =============================================================================
# Bookings
# =============================================================================

class TestBookingEndpoints:

    def test_quote(self, client, hiking, promos):
        resp = client.post("/bookings/quote", json={
            "experience_id": hiking.id, "date": "2025-11-15", "time": "08:00 AM",
            "guests": 2, "promo_code": "SAVE10",
        })

        assert resp.status_code == 200
        assert resp.get_json() == {
            "experience_id": hiking.id,
            "date": "2025-11-15",
            "time": "08:00 AM",
            "guests": 2,
            "unit_price": 149.0,
            "subtotal": 298.0,
            "discount": 29.8,
            "total_price": 268.2,
            "promo_code": "SAVE10",
            "remaining": 10,
        }

    def test_create_requires_auth(self, client, booking_payload):
        resp = client.post("/bookings", json=booking_payload)
        assert resp.status_code == 401

    def test_create_booking(self, client, auth_headers, hiking, booking_payload):
        resp = client.post("/bookings", json=booking_payload, headers=auth_headers)

        assert resp.status_code == 201
        booking = resp.get_json()["booking"]
        assert booking["id"] is not None
        assert booking["status"] == "confirmed"
        assert booking["guests"] == 2
        assert booking["total_price"] == 298.0

        db.session.expire_all()
        assert [s.booked for s in hiking.slots] == [2, 0, 0]

        audit = AuditLog.query.filter_by(action="BOOKING_CREATE").one()
        assert json.loads(audit.metadata_json)["guests"] == 2

    def test_client_user_id_is_ignored(self, client, auth_headers, other_auth_headers, booking_payload):
        other_id = client.get("/auth/me", headers=other_auth_headers).get_json()["id"]
        me_id = client.get("/auth/me", headers=auth_headers).get_json()["id"]

        resp = client.post("/bookings", json=dict(booking_payload, user_id=other_id), headers=auth_headers)

        assert resp.get_json()["booking"]["user_id"] == me_id
        assert client.get("/bookings", headers=other_auth_headers).get_json() == []

    def test_missing_fields(self, client, auth_headers, booking_payload):
        payload = dict(booking_payload)
        del payload["phone"]

        resp = client.post("/bookings", json=payload, headers=auth_headers)

        assert resp.status_code == 400
        assert resp.get_json()["details"]["missing"] == ["phone"]

    @pytest.mark.parametrize("body", [["hello"], "hello"])
    def test_body_must_be_an_object(self, client, auth_headers, hiking, body):
        assert client.post("/bookings", json=body, headers=auth_headers).status_code == 400
        assert client.post("/bookings/quote", json=body).status_code == 400
        assert hiking.slots[0].booked == 0

    def test_fractional_experience_id_is_rejected(self, client, hiking):
        resp = client.post("/bookings/quote", json={
            "experience_id": hiking.id + 0.9, "date": "2025-11-15", "time": "08:00 AM", "guests": 1,
        })

        assert resp.status_code == 400
        assert resp.get_json()["details"]["field"] == "experience_id"

    def test_experience_not_found(self, client, auth_headers, booking_payload):
        resp = client.post("/bookings", json=dict(booking_payload, experience_id=9999), headers=auth_headers)
        assert resp.status_code == 404

    def test_slot_not_found(self, client, auth_headers, hiking, booking_payload):
        resp = client.post("/bookings", json=dict(booking_payload, time="09:00 AM"), headers=auth_headers)

        assert resp.status_code == 400
        assert resp.get_json()["code"] == "SLOT_NOT_FOUND"
        assert AuditLog.query.filter_by(action="BOOKING_FAIL").count() == 1

    def test_insufficient_capacity(self, client, auth_headers, hiking, booking_payload):
        resp = client.post("/bookings", json=dict(booking_payload, guests=11), headers=auth_headers)

        assert resp.status_code == 400
        assert resp.get_json()["code"] == "INSUFFICIENT_CAPACITY"
        assert db.session.get(Slot, hiking.slots[0].id).booked == 0

    def test_booking_with_promo_counts_a_use(self, client, auth_headers, hiking, promos, booking_payload):
        resp = client.post("/bookings", json=dict(booking_payload, promo_code="FLAT100", total_price=198),
                           headers=auth_headers)

        assert resp.status_code == 201
        assert resp.get_json()["booking"]["discount"] == 100.0
        db.session.expire_all()
        assert db.session.get(PromoCode, promos["FLAT100"].id).current_uses == 1

    def test_list_my_bookings(self, client, auth_headers, hiking, booking_payload):
        assert client.get("/bookings", headers=auth_headers).get_json() == []

        client.post("/bookings", json=booking_payload, headers=auth_headers)
        rows = client.get("/bookings", headers=auth_headers).get_json()

        assert len(rows) == 1
        assert rows[0]["experience"]["title"] == "Mountain Hiking Adventure"
        assert rows[0]["experience"]["location"] == "Colorado, USA"

    def test_get_booking_owner_only(self, client, auth_headers, other_auth_headers, booking_payload):
        booking_id = client.post("/bookings", json=booking_payload, headers=auth_headers).get_json()["booking"]["id"]

        assert client.get(f"/bookings/{booking_id}", headers=auth_headers).status_code == 200
        assert client.get(f"/bookings/{booking_id}", headers=other_auth_headers).status_code == 404

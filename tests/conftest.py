"""
Pytest configuration and fixtures.

Every test gets a fresh in-memory SQLite database inside an app context.
"""

from datetime import date, datetime, timedelta

import pytest

from app import create_app
from config import Config
from models import db
from models.experience import Experience, Slot
from models.promo_code import PromoCode
from models.user import User
from utils.seed import DEMO_EXPERIENCES, build_experience


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    BCRYPT_ROUNDS = 4
    LOG_LEVEL = "WARNING"
    MAX_GUESTS_PER_BOOKING = 20


# =============================================================================
# App Fixtures
# =============================================================================

@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def hiking(app):
    """Mountain hiking: $149, slots 2025-11-15 08:00 AM (10), 02:00 PM (8), 2025-11-16 08:00 AM (10)."""
    experience = build_experience(DEMO_EXPERIENCES[0])
    db.session.add(experience)
    db.session.commit()
    return experience


@pytest.fixture
def cheap_tour(app):
    experience = Experience(
        title="Harbour Walk",
        description="Short walk along the harbour",
        image="/harbour.jpg",
        location="Sydney, Australia",
        price=50,
        amenities=["Guide"],
    )
    experience.slots.append(Slot(date=date(2025, 12, 1), time="09:00 AM", available=4, booked=0))
    db.session.add(experience)
    db.session.commit()
    return experience


@pytest.fixture
def promos(app):
    now = datetime.utcnow()
    rows = {
        "SAVE10": PromoCode(code="SAVE10", discount_type="percentage", discount_value=10, max_uses=100),
        "FLAT100": PromoCode(code="FLAT100", discount_type="fixed", discount_value=100, max_uses=50),
        "OFFLINE": PromoCode(code="OFFLINE", discount_type="percentage", discount_value=15, active=False),
        "OLD": PromoCode(code="OLD", discount_type="fixed", discount_value=5,
                         expiry_date=now - timedelta(days=1)),
        "USEDUP": PromoCode(code="USEDUP", discount_type="fixed", discount_value=5,
                            max_uses=3, current_uses=3),
        "LASTONE": PromoCode(code="LASTONE", discount_type="percentage", discount_value=50,
                             max_uses=1, current_uses=0),
    }
    db.session.add_all(rows.values())
    db.session.commit()
    return rows


@pytest.fixture
def user(app):
    row = User(email="guest@example.com", password_hash="not-a-real-hash", full_name="Guest User")
    db.session.add(row)
    db.session.commit()
    return row


@pytest.fixture
def other_user(app):
    row = User(email="other@example.com", password_hash="not-a-real-hash", full_name="Other User")
    db.session.add(row)
    db.session.commit()
    return row


def _register_and_login(client, email):
    client.post("/auth/register", json={
        "email": email,
        "password": "correct-horse-battery",
        "full_name": "Alex Doe",
    })
    resp = client.post("/auth/login", json={"email": email, "password": "correct-horse-battery"})
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


@pytest.fixture
def auth_headers(client):
    return _register_and_login(client, "alex@example.com")


@pytest.fixture
def other_auth_headers(client):
    return _register_and_login(client, "sam@example.com")


@pytest.fixture
def booking_payload(hiking):
    return {
        "experience_id": hiking.id,
        "first_name": "Alex",
        "last_name": "Doe",
        "email": "alex@example.com",
        "phone": "+1 555 0100",
        "date": "2025-11-15",
        "time": "08:00 AM",
        "guests": 2,
        "total_price": 298,
    }

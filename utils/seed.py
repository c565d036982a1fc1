from datetime import date

from models import db
from models.experience import Experience, Slot
from models.promo_code import PromoCode

DEMO_EXPERIENCES = [
    {
        "title": "Mountain Hiking Adventure",
        "description": "Experience breathtaking mountain views and challenging trails",
        "image": "/mountain-hiking-adventure.png",
        "location": "Colorado, USA",
        "price": 149,
        "rating": 4.8,
        "review_count": 234,
        "amenities": ["Guide", "Equipment", "Lunch", "Photos"],
        "slots": [
            (date(2025, 11, 15), "08:00 AM", 10),
            (date(2025, 11, 15), "02:00 PM", 8),
            (date(2025, 11, 16), "08:00 AM", 10),
        ],
    },
    {
        "title": "Beach Sunset Experience",
        "description": "Relax and enjoy a beautiful sunset on a pristine beach",
        "image": "/beach-sunset-experience.jpg",
        "location": "Maldives",
        "price": 99,
        "rating": 4.9,
        "review_count": 456,
        "amenities": ["Refreshments", "Photography", "Comfortable Seating"],
        "slots": [
            (date(2025, 11, 15), "05:00 PM", 15),
            (date(2025, 11, 16), "05:00 PM", 15),
        ],
    },
    {
        "title": "City Food Tour",
        "description": "Discover the best local cuisine and hidden food gems",
        "image": "/city-food-tour.jpg",
        "location": "Bangkok, Thailand",
        "price": 79,
        "rating": 4.7,
        "review_count": 189,
        "amenities": ["Local Guide", "Food Tastings", "Drinks"],
        "slots": [
            (date(2025, 11, 15), "10:00 AM", 12),
            (date(2025, 11, 16), "10:00 AM", 12),
        ],
    },
    {
        "title": "Scuba Diving Expedition",
        "description": "Explore vibrant coral reefs and marine life",
        "image": "/images/diving.png",
        "location": "Great Barrier Reef, Australia",
        "price": 199,
        "rating": 4.9,
        "review_count": 567,
        "amenities": ["Equipment", "Certification", "Instructor", "Underwater Photos"],
        "slots": [
            (date(2025, 11, 15), "07:00 AM", 6),
            (date(2025, 11, 16), "07:00 AM", 6),
        ],
    },
]

DEMO_PROMO_CODES = [
    {"code": "SAVE10", "discount_type": "percentage", "discount_value": 10, "max_uses": 100},
    {"code": "FLAT100", "discount_type": "fixed", "discount_value": 100, "max_uses": 50},
    {"code": "WELCOME20", "discount_type": "percentage", "discount_value": 20, "max_uses": 200},
]


def build_experience(data: dict) -> Experience:
    fields = {k: v for k, v in data.items() if k != "slots"}
    experience = Experience(**fields)
    for slot_date, time, available in data.get("slots", []):
        experience.slots.append(Slot(date=slot_date, time=time, available=available, booked=0))
    return experience


def seed_demo_data() -> tuple[int, int]:
    """Insert demo experiences and promo codes that are not there yet. Returns (experiences, promos) added."""
    existing_titles = {t for (t,) in db.session.query(Experience.title).all()}
    added_experiences = 0
    for data in DEMO_EXPERIENCES:
        if data["title"] not in existing_titles:
            db.session.add(build_experience(data))
            added_experiences += 1

    existing_codes = {c for (c,) in db.session.query(PromoCode.code).all()}
    added_promos = 0
    for data in DEMO_PROMO_CODES:
        if data["code"] not in existing_codes:
            db.session.add(PromoCode(active=True, **data))
            added_promos += 1

    db.session.commit()
    return added_experiences, added_promos

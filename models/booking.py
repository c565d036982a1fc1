from datetime import datetime
from models.db import db

BOOKING_CONFIRMED = "confirmed"
BOOKING_CANCELLED = "cancelled"


class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    experience_id = db.Column(db.Integer, db.ForeignKey("experiences.id"), nullable=False, index=True)

    # guest contact
    first_name = db.Column(db.String(80), nullable=False)
    last_name = db.Column(db.String(80), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(30), nullable=False)

    date = db.Column(db.Date, nullable=False)
    time = db.Column(db.String(20), nullable=False)
    guests = db.Column(db.Integer, nullable=False)

    total_price = db.Column(db.Numeric(10, 2), nullable=False)
    promo_code = db.Column(db.String(40), nullable=True)
    discount = db.Column(db.Numeric(10, 2), nullable=False, default=0)

    status = db.Column(db.String(20), nullable=False, default=BOOKING_CONFIRMED)
    # status values: confirmed, cancelled

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    experience = db.relationship("Experience")

    __table_args__ = (
        db.CheckConstraint("guests > 0", name="ck_booking_guests_positive"),
        db.CheckConstraint("total_price >= 0", name="ck_booking_total_non_negative"),
        db.CheckConstraint("discount >= 0", name="ck_booking_discount_non_negative"),
        db.CheckConstraint("status IN ('confirmed', 'cancelled')", name="ck_booking_status"),
    )

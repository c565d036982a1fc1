from datetime import datetime

from sqlalchemy.ext.orderinglist import ordering_list

from models.db import db


class Experience(db.Model):
    __tablename__ = "experiences"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(160), nullable=False)
    description = db.Column(db.Text, nullable=False)
    image = db.Column(db.String(255), nullable=False)
    location = db.Column(db.String(160), nullable=False, index=True)

    price = db.Column(db.Numeric(10, 2), nullable=False)  # per guest
    rating = db.Column(db.Float, nullable=False, default=4.5)
    review_count = db.Column(db.Integer, nullable=False, default=0)
    amenities = db.Column(db.JSON, nullable=False, default=list)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    slots = db.relationship(
        "Slot",
        back_populates="experience",
        order_by="Slot.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )


class Slot(db.Model):
    __tablename__ = "slots"

    id = db.Column(db.Integer, primary_key=True)
    experience_id = db.Column(db.Integer, db.ForeignKey("experiences.id"), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False, default=0)

    date = db.Column(db.Date, nullable=False)
    time = db.Column(db.String(20), nullable=False)  # display string, e.g. "08:00 AM"

    available = db.Column(db.Integer, nullable=False)
    booked = db.Column(db.Integer, nullable=False, default=0)

    experience = db.relationship("Experience", back_populates="slots")

    __table_args__ = (
        # One slot per experience/date/time, so lookups are unambiguous
        db.UniqueConstraint("experience_id", "date", "time", name="uq_experience_slot"),
        db.CheckConstraint("available >= 0", name="ck_slot_available_non_negative"),
        db.CheckConstraint("booked >= 0", name="ck_slot_booked_non_negative"),
        db.CheckConstraint("booked <= available", name="ck_slot_no_oversell"),
    )

    @property
    def remaining(self) -> int:
        return max((self.available or 0) - (self.booked or 0), 0)

"""
Booking creation and lookup.

Prices are always recomputed here from the experience's unit price and the
promo record. Totals and discounts sent by the client are only compared
against the server figures and logged when they disagree.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Tuple

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.booking import BOOKING_CONFIRMED, Booking
from models.experience import Experience, Slot
from models.promo_code import PromoCode, normalize_code
from services.exceptions import BookingNotFound, BookingServiceError, ValidationError
from services.experiences import get_experience, parse_experience_id
from services.promo import evaluate_promo, parse_amount, redeem_promo, to_money
from services.slots import ensure_capacity, find_slot, parse_slot_date, reserve_capacity
from utils.validators import is_valid_email

logger = logging.getLogger(__name__)

CONTACT_FIELDS = ("first_name", "last_name", "email", "phone")


def parse_guests(value) -> int:
    if value is None or value == "":
        raise ValidationError("guests is required", field="guests")
    if isinstance(value, bool) or isinstance(value, float) and not value.is_integer():
        raise ValidationError("guests must be a positive integer", field="guests")
    try:
        guests = int(value)
    except (TypeError, ValueError):
        raise ValidationError("guests must be a positive integer", field="guests")
    if guests < 1:
        raise ValidationError("guests must be a positive integer", field="guests")

    max_guests = current_app.config.get("MAX_GUESTS_PER_BOOKING")
    if max_guests and guests > max_guests:
        raise ValidationError(f"At most {max_guests} guests per booking", field="guests")
    return guests


@dataclass
class SlotSelection:
    experience_id: int
    date: date
    time: str
    guests: int
    promo_code: Optional[str] = None

    @classmethod
    def from_payload(cls, data: dict) -> "SlotSelection":
        missing = [f for f in ("experience_id", "date", "time", "guests") if data.get(f) in (None, "")]
        if missing:
            raise ValidationError("All fields are required", details={"missing": missing})

        time = data.get("time")
        if not isinstance(time, str):
            raise ValidationError("time must be a string", field="time")

        promo_code = data.get("promo_code")
        if promo_code is not None and not isinstance(promo_code, str):
            raise ValidationError("promo_code must be a string", field="promo_code")

        return cls(
            experience_id=parse_experience_id(data.get("experience_id")),
            date=parse_slot_date(data.get("date")),
            time=time,
            guests=parse_guests(data.get("guests")),
            promo_code=normalize_code(promo_code) or None,
        )


@dataclass
class BookingRequest(SlotSelection):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    total_price: Decimal = Decimal("0")
    discount: Optional[Decimal] = None

    @classmethod
    def from_payload(cls, data: dict) -> "BookingRequest":
        contact = {f: data.get(f).strip() if isinstance(data.get(f), str) else "" for f in CONTACT_FIELDS}
        missing = [f for f in CONTACT_FIELDS if not contact[f]]
        missing += [f for f in ("experience_id", "date", "time", "guests", "total_price")
                    if data.get(f) in (None, "")]
        if missing:
            raise ValidationError("All fields are required", details={"missing": missing})

        if not is_valid_email(contact["email"]):
            raise ValidationError("Invalid email", field="email")

        selection = SlotSelection.from_payload(data)
        discount = data.get("discount")

        # user_id in the payload is never read; the owner is the session user
        return cls(
            experience_id=selection.experience_id,
            date=selection.date,
            time=selection.time,
            guests=selection.guests,
            promo_code=selection.promo_code,
            email=contact["email"].lower(),
            first_name=contact["first_name"],
            last_name=contact["last_name"],
            phone=contact["phone"],
            total_price=parse_amount(data.get("total_price"), field="total_price"),
            discount=parse_amount(discount, field="discount") if discount not in (None, "") else None,
        )


@dataclass
class Quote:
    experience: Experience
    slot: Slot
    guests: int
    unit_price: Decimal
    subtotal: Decimal
    discount: Decimal
    total_price: Decimal
    promo: Optional[PromoCode] = None


def build_quote(selection: SlotSelection, now: Optional[datetime] = None) -> Quote:
    """Validate a slot selection and price it. Never writes."""
    experience = get_experience(selection.experience_id)
    slot = find_slot(experience, selection.date, selection.time)
    ensure_capacity(slot, selection.guests)

    unit_price = to_money(experience.price)
    subtotal = to_money(unit_price * selection.guests)

    promo = None
    discount = Decimal("0.00")
    if selection.promo_code:
        evaluation = evaluate_promo(selection.promo_code, subtotal, now=now)
        promo = evaluation.promo
        discount = evaluation.discount

    total_price = max(subtotal - discount, Decimal("0.00"))

    return Quote(
        experience=experience,
        slot=slot,
        guests=selection.guests,
        unit_price=unit_price,
        subtotal=subtotal,
        discount=discount,
        total_price=total_price,
        promo=promo,
    )


def create_booking(user_id: int, request: BookingRequest, now: Optional[datetime] = None) -> Booking:
    """
    Reserve capacity, redeem the promo and write the booking in one transaction.

    All validation runs before the first write. The reservation and the promo
    redemption are conditional updates, so a request that lost a race still
    fails cleanly and the transaction is rolled back as a whole.
    """
    quote = build_quote(request, now=now)

    if request.total_price != quote.total_price or (
        request.discount is not None and request.discount != quote.discount
    ):
        logger.warning(
            "Client price for experience %s differs from server quote: total %s vs %s, discount %s vs %s",
            quote.experience.id, request.total_price, quote.total_price, request.discount, quote.discount,
        )

    try:
        reserve_capacity(quote.slot, request.guests)
        if quote.promo is not None:
            redeem_promo(quote.promo, now=now)

        booking = Booking(
            user_id=user_id,
            experience_id=quote.experience.id,
            first_name=request.first_name,
            last_name=request.last_name,
            email=request.email,
            phone=request.phone,
            date=quote.slot.date,
            time=quote.slot.time,
            guests=request.guests,
            total_price=quote.total_price,
            promo_code=quote.promo.code if quote.promo is not None else None,
            discount=quote.discount,
            status=BOOKING_CONFIRMED,
        )
        db.session.add(booking)
        db.session.commit()
    except (BookingServiceError, SQLAlchemyError):
        db.session.rollback()
        raise

    logger.info("Booking %s created for user %s (%s guests)", booking.id, user_id, booking.guests)
    return booking


def list_bookings(user_id: int) -> List[Tuple[Booking, Optional[Experience]]]:
    """All bookings of ``user_id``, newest first, each with its experience."""
    rows = (
        Booking.query
        .filter_by(user_id=user_id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .all()
    )

    experience_ids = {b.experience_id for b in rows}
    experiences = {}
    if experience_ids:
        experiences = {
            e.id: e for e in Experience.query.filter(Experience.id.in_(experience_ids)).all()
        }

    return [(b, experiences.get(b.experience_id)) for b in rows]


def get_booking(user_id: int, booking_id: int) -> Booking:
    booking = db.session.get(Booking, booking_id)
    if not booking or booking.user_id != user_id:
        raise BookingNotFound(booking_id)
    return booking

from flask import Blueprint, jsonify, g

from services.bookings import (
    BookingRequest,
    SlotSelection,
    build_quote,
    create_booking,
    get_booking,
    list_bookings,
)
from services.exceptions import BookingServiceError
from utils.audit import log_event
from utils.auth_context import login_required
from utils.serializers import serialize_booking, serialize_quote
from utils.validators import json_body

booking_bp = Blueprint("booking", __name__, url_prefix="/bookings")


@booking_bp.post("/quote")
def quote():
    data = json_body()
    return jsonify(serialize_quote(build_quote(SlotSelection.from_payload(data)))), 200


@booking_bp.post("")
@login_required
def create():
    data = json_body()

    try:
        booking = create_booking(g.user.id, BookingRequest.from_payload(data))
    except BookingServiceError as exc:
        log_event(
            "BOOKING_FAIL",
            user_id=g.user.id,
            entity="experience",
            entity_id=data.get("experience_id"),
            metadata={"reason": exc.code, "date": data.get("date"), "time": data.get("time")},
        )
        raise

    log_event(
        "BOOKING_CREATE",
        user_id=g.user.id,
        entity="booking",
        entity_id=booking.id,
        metadata={"experience_id": booking.experience_id, "guests": booking.guests, "promo_code": booking.promo_code},
    )
    return jsonify(message="Booking created successfully", booking=serialize_booking(booking)), 201


@booking_bp.get("")
@login_required
def my_bookings():
    rows = list_bookings(g.user.id)
    return jsonify([serialize_booking(b, experience) for b, experience in rows]), 200


@booking_bp.get("/<int:booking_id>")
@login_required
def detail(booking_id: int):
    booking = get_booking(g.user.id, booking_id)
    return jsonify(serialize_booking(booking, booking.experience)), 200

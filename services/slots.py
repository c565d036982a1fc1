"""Slot lookup and capacity reservation."""

import logging
from datetime import date, datetime

from sqlalchemy import update

from models import db
from models.experience import Experience, Slot
from services.exceptions import InsufficientCapacity, SlotNotFound, ValidationError

logger = logging.getLogger(__name__)


def parse_slot_date(value) -> date:
    """Accept "2025-11-15" or a full ISO timestamp; only the calendar date is kept."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("date is required", field="date")
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
    except ValueError:
        raise ValidationError("Invalid date. Use YYYY-MM-DD", field="date")


def find_slot(experience: Experience, slot_date, time: str) -> Slot:
    """First slot of ``experience`` on the same calendar date with exactly ``time``."""
    slot_date = parse_slot_date(slot_date)
    for slot in experience.slots:
        if slot.date == slot_date and slot.time == time:
            return slot
    raise SlotNotFound(slot_date, time)


def ensure_capacity(slot: Slot, quantity: int) -> None:
    """Read-only pre-check; the authoritative check is in :func:`reserve_capacity`."""
    if quantity > slot.remaining:
        raise InsufficientCapacity(requested=quantity, remaining=slot.remaining)


def reserve_capacity(slot: Slot, quantity: int) -> None:
    """
    Add ``quantity`` to ``slot.booked`` if it still fits.

    Check and increment happen in one conditional UPDATE, so concurrent
    requests for the same slot cannot both pass on stale counts. Runs in the
    caller's transaction and does not commit.
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError("guests must be a positive integer", field="guests")

    result = db.session.execute(
        update(Slot)
        .where(Slot.id == slot.id, Slot.booked + quantity <= Slot.available)
        .values(booked=Slot.booked + quantity)
        .execution_options(synchronize_session=False)
    )
    db.session.expire(slot, ["booked"])

    if result.rowcount != 1:
        logger.info("Capacity rejected for slot %s: requested %s, remaining %s",
                    slot.id, quantity, slot.remaining)
        raise InsufficientCapacity(requested=quantity, remaining=slot.remaining)

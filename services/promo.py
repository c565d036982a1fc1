"""Promo code evaluation and redemption."""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from sqlalchemy import or_, update

from models import db
from models.promo_code import DISCOUNT_PERCENTAGE, PromoCode, normalize_code
from services.exceptions import (
    PromoExpired,
    PromoInactive,
    PromoNotFound,
    PromoUsageLimitReached,
    ValidationError,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def parse_amount(value, field: str = "amount") -> Decimal:
    """Parse a non-negative money amount from request data."""
    if value is None or value == "":
        raise ValidationError(f"{field} is required", field=field)
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", field=field)
    try:
        amount = to_money(value)
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number", field=field)
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"{field} must be zero or more", field=field)
    return amount


@dataclass
class PromoEvaluation:
    promo: PromoCode
    discount: Decimal

    @property
    def discount_type(self) -> str:
        return self.promo.discount_type

    @property
    def discount_value(self) -> Decimal:
        return self.promo.discount_value


def find_promo(code: str) -> PromoCode:
    normalized = normalize_code(code)
    promo = PromoCode.query.filter_by(code=normalized).first() if normalized else None
    if not promo:
        raise PromoNotFound(normalized or code)
    return promo


def check_promo(promo: PromoCode, now: Optional[datetime] = None) -> None:
    """Raise if the promo cannot be used at ``now``."""
    now = now or datetime.utcnow()

    if not promo.active:
        raise PromoInactive(promo.code)

    if promo.expiry_date is not None and now > promo.expiry_date:
        raise PromoExpired(promo.code)

    if promo.max_uses is not None and promo.current_uses >= promo.max_uses:
        raise PromoUsageLimitReached(promo.code)


def compute_discount(promo: PromoCode, amount: Decimal, clamp: bool = True) -> Decimal:
    """
    Percentage promos take ``discount_value`` percent of ``amount``; fixed
    promos take ``discount_value`` flat. With ``clamp`` the result never
    exceeds ``amount``.
    """
    amount = to_money(amount)
    value = Decimal(str(promo.discount_value))

    if promo.discount_type == DISCOUNT_PERCENTAGE:
        discount = to_money(amount * value / Decimal(100))
    else:
        discount = to_money(value)

    if clamp:
        discount = min(discount, amount)
    return discount


def evaluate_promo(code: str, amount, now: Optional[datetime] = None, clamp: bool = True) -> PromoEvaluation:
    """
    Look up ``code`` and compute its discount on ``amount``.

    Read-only: the promo record is never modified here. Usage is counted by
    :func:`redeem_promo` when a booking is actually written.
    """
    promo = find_promo(code)
    check_promo(promo, now)
    return PromoEvaluation(promo=promo, discount=compute_discount(promo, amount, clamp=clamp))


def redeem_promo(promo: PromoCode, now: Optional[datetime] = None) -> None:
    """
    Count one use of ``promo`` inside the caller's transaction.

    A single conditional UPDATE, so two concurrent redemptions can never push
    ``current_uses`` past ``max_uses``. Does not commit.
    """
    now = now or datetime.utcnow()

    result = db.session.execute(
        update(PromoCode)
        .where(
            PromoCode.id == promo.id,
            PromoCode.active.is_(True),
            or_(PromoCode.expiry_date.is_(None), PromoCode.expiry_date >= now),
            or_(PromoCode.max_uses.is_(None), PromoCode.current_uses < PromoCode.max_uses),
        )
        .values(current_uses=PromoCode.current_uses + 1)
        .execution_options(synchronize_session=False)
    )
    db.session.expire(promo)

    if result.rowcount != 1:
        # reloads the row and raises the specific reason
        check_promo(promo, now)
        raise PromoUsageLimitReached(promo.code)

    logger.info("Promo %s redeemed", promo.code)

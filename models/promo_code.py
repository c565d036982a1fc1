from datetime import datetime

from sqlalchemy.orm import validates

from models.db import db

DISCOUNT_PERCENTAGE = "percentage"
DISCOUNT_FIXED = "fixed"
DISCOUNT_TYPES = (DISCOUNT_PERCENTAGE, DISCOUNT_FIXED)


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


class PromoCode(db.Model):
    __tablename__ = "promo_codes"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(40), unique=True, nullable=False, index=True)  # always uppercase

    discount_type = db.Column(db.String(20), nullable=False)
    discount_value = db.Column(db.Numeric(10, 2), nullable=False)

    max_uses = db.Column(db.Integer, nullable=True)  # NULL = unlimited
    current_uses = db.Column(db.Integer, nullable=False, default=0)
    expiry_date = db.Column(db.DateTime, nullable=True)
    active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.CheckConstraint("discount_type IN ('percentage', 'fixed')", name="ck_promo_discount_type"),
        db.CheckConstraint("discount_value > 0", name="ck_promo_discount_positive"),
        db.CheckConstraint(
            "discount_type != 'percentage' OR discount_value <= 100",
            name="ck_promo_percentage_range",
        ),
        db.CheckConstraint(
            "max_uses IS NULL OR current_uses <= max_uses",
            name="ck_promo_usage_cap",
        ),
    )

    @validates("code")
    def _uppercase_code(self, key, value):
        return normalize_code(value)

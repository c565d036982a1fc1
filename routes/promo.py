from flask import Blueprint, jsonify, g

from services.exceptions import BookingServiceError, ValidationError
from services.promo import evaluate_promo, parse_amount
from utils.audit import log_event
from utils.validators import json_body

promo_bp = Blueprint("promo", __name__, url_prefix="/promo")


@promo_bp.post("/validate")
def validate():
    data = json_body()
    code = data.get("code")
    if not isinstance(code, str) or not code.strip():
        raise ValidationError("Promo code is required", field="code")

    amount = parse_amount(data.get("amount"))
    user = getattr(g, "user", None)

    try:
        evaluation = evaluate_promo(code, amount)
    except BookingServiceError as exc:
        log_event(
            "PROMO_VALIDATE_FAIL",
            user_id=user.id if user else None,
            entity="promo_code",
            metadata={"code": code.strip().upper(), "reason": exc.code},
        )
        raise

    return jsonify(
        message="Promo code is valid",
        code=evaluation.promo.code,
        discount=float(evaluation.discount),
        discount_type=evaluation.discount_type,
        discount_value=float(evaluation.discount_value),
    ), 200

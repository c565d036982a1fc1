from flask import request

from services.exceptions import ValidationError


def is_valid_email(email: str) -> bool:
    """Loose shape check; deliverability is not verified."""
    return isinstance(email, str) and "@" in email and len(email) <= 255


def json_body() -> dict:
    """Parsed JSON object of the current request. An absent or unparsable body is an empty dict."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data

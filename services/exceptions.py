"""
Booking service exceptions.

Every failure the booking flow can surface to a caller. Each carries a
machine-readable ``code`` and the HTTP status the API answers with.
"""

from typing import Any, Dict, Optional


class BookingServiceError(Exception):
    """Base exception for booking service errors."""

    status_code = 400

    def __init__(
        self,
        message: str,
        code: str = "BOOKING_SERVICE_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.message,
            "code": self.code,
            "details": self.details,
        }


class ValidationError(BookingServiceError):
    """Raised when request data is missing or malformed."""

    def __init__(
        self,
        message: str,
        field: str = None,
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(message=message, code="VALIDATION_ERROR", details=error_details)


class AuthError(BookingServiceError):
    """Raised when the caller has no valid credential."""

    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message=message, code="AUTH_REQUIRED")


# -----------------------------------------------------------------------------
# Not found
# -----------------------------------------------------------------------------

class NotFoundError(BookingServiceError):
    status_code = 404


class ExperienceNotFound(NotFoundError):
    def __init__(self, experience_id=None):
        super().__init__(
            message="Experience not found",
            code="EXPERIENCE_NOT_FOUND",
            details={"experience_id": experience_id},
        )


class BookingNotFound(NotFoundError):
    def __init__(self, booking_id=None):
        super().__init__(
            message="Booking not found",
            code="BOOKING_NOT_FOUND",
            details={"booking_id": booking_id},
        )


class PromoNotFound(NotFoundError):
    def __init__(self, code: str = None):
        super().__init__(
            message="Invalid promo code",
            code="PROMO_NOT_FOUND",
            details={"promo_code": code},
        )


class SlotNotFound(NotFoundError):
    """The experience exists but offers nothing at that date/time."""

    status_code = 400

    def __init__(self, date=None, time: str = None):
        super().__init__(
            message="Slot not found",
            code="SLOT_NOT_FOUND",
            details={"date": date.isoformat() if date else None, "time": time},
        )


# -----------------------------------------------------------------------------
# State conflicts
# -----------------------------------------------------------------------------

class StateConflictError(BookingServiceError):
    status_code = 400


class InsufficientCapacity(StateConflictError):
    def __init__(self, requested: int, remaining: int):
        super().__init__(
            message="Not enough slots available",
            code="INSUFFICIENT_CAPACITY",
            details={"requested": requested, "remaining": remaining},
        )


class PromoInactive(StateConflictError):
    def __init__(self, code: str):
        super().__init__(
            message="Promo code is inactive",
            code="PROMO_INACTIVE",
            details={"promo_code": code},
        )


class PromoExpired(StateConflictError):
    def __init__(self, code: str):
        super().__init__(
            message="Promo code has expired",
            code="PROMO_EXPIRED",
            details={"promo_code": code},
        )


class PromoUsageLimitReached(StateConflictError):
    def __init__(self, code: str):
        super().__init__(
            message="Promo code usage limit reached",
            code="PROMO_USAGE_LIMIT_REACHED",
            details={"promo_code": code},
        )

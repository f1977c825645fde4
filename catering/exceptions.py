"""
Booking Change Errors

Raised by the status transition controller when a requested change is
rejected. All of them are recoverable: the operator is told what went wrong
and the booking is left as it was.
"""

from typing import Optional


class BookingError(Exception):
    """Base class for rejected booking changes."""

    code = "booking_error"
    http_status = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"success": False, "error": self.code, "detail": self.message}


class InvalidTransition(BookingError):
    """Requested status change is not allowed from the current status."""

    code = "invalid_transition"
    http_status = 409

    def __init__(self, current: str, requested: str, message: Optional[str] = None):
        self.current = current
        self.requested = requested
        super().__init__(
            message or f"Cannot change booking status from '{current}' to '{requested}'"
        )


class MissingReason(BookingError):
    """Cancellation requested without a reason."""

    code = "missing_reason"
    http_status = 422

    def __init__(self, message: str = "A cancellation reason is required"):
        super().__init__(message)


class InvalidAmount(BookingError):
    """Deposit amount outside 0..total."""

    code = "invalid_amount"
    http_status = 422

    def __init__(self, amount: float, total: float):
        self.amount = amount
        self.total = total
        super().__init__(
            f"Deposit amount {amount} must be between 0 and the booking total {total}"
        )


class ApiError(BookingError):
    """The booking API rejected or failed the request."""

    code = "api_error"
    http_status = 502


class InvalidPaymentStatus(BookingError):
    """Payment status outside the known set."""

    code = "invalid_payment_status"
    http_status = 422

    def __init__(self, requested: str):
        self.requested = requested
        super().__init__(f"Unknown payment status '{requested}'")

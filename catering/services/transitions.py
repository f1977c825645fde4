"""
Status Transition Controller

Validates booking status and payment changes requested from the admin views
and forwards valid ones to the booking API.

The controller never retries and never edits the booking it was given; on
success the caller refreshes its view from the returned booking (or refetches),
on failure it shows the error and keeps the booking as it was. Callers should
keep at most one change in flight per booking.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from catering.exceptions import (
    ApiError,
    InvalidAmount,
    InvalidPaymentStatus,
    InvalidTransition,
    MissingReason,
)
from catering.models import Booking, BookingStatus, PaymentStatus
from catering.services.booking_api.base import BaseBookingAPI, BookingApiResult
from catering.services.status_policy import can_transition

logger = logging.getLogger(__name__)


@dataclass
class BookingChangeResult:
    """Accepted change, as confirmed by the booking service."""
    success: bool
    booking: Optional[Booking]
    message: str


class StatusTransitionController:
    """
    Gatekeeper for booking status and payment changes.

    Example:
        >>> controller = StatusTransitionController(get_booking_api())
        >>> result = await controller.request_status_change(booking, "confirmed")
        >>> result.booking.status
        <BookingStatus.CONFIRMED: 'confirmed'>
    """

    def __init__(self, booking_api: BaseBookingAPI):
        self.booking_api = booking_api

    @staticmethod
    def _accepted(result: BookingApiResult, default_message: str) -> BookingChangeResult:
        if not result.success:
            raise ApiError(result.error_message or default_message)
        return BookingChangeResult(
            success=True,
            booking=result.booking,
            message=result.message or default_message,
        )

    async def request_status_change(
        self,
        booking: Booking,
        new_status: Union[BookingStatus, str],
        notes: Optional[str] = None,
        cancellation_reason: Optional[str] = None,
    ) -> BookingChangeResult:
        """
        Request a status change for a booking.

        Raises:
            MissingReason: Cancellation without a non-blank reason
            InvalidTransition: Change not allowed from the current status
            ApiError: Booking service failed or rejected the change
        """
        try:
            target = BookingStatus(new_status)
        except ValueError:
            raise InvalidTransition(booking.status.value, str(new_status)) from None

        reason = (cancellation_reason or "").strip()
        if target == BookingStatus.CANCELLED and not reason:
            raise MissingReason()

        if not can_transition(booking.status, target):
            raise InvalidTransition(booking.status.value, target.value)

        logger.info(
            f"Status change {booking.booking_reference}: "
            f"{booking.status.value} -> {target.value}"
        )

        result = await self.booking_api.update_booking_status(
            booking.id,
            target,
            notes=notes or None,
            cancellation_reason=reason or None,
        )
        if not result.success:
            logger.warning(
                f"Status change {booking.booking_reference} failed: {result.error_message}"
            )
        return self._accepted(result, "Booking status updated successfully")

    async def request_payment_change(
        self,
        booking: Booking,
        payment_status: Union[PaymentStatus, str],
        deposit_amount: float,
    ) -> BookingChangeResult:
        """
        Request a payment update for a booking.

        Raises:
            InvalidPaymentStatus: Payment status outside the known set
            InvalidAmount: Deposit below zero or above the booking total
            ApiError: Booking service failed or rejected the change
        """
        try:
            payment_status = PaymentStatus(payment_status)
        except ValueError:
            raise InvalidPaymentStatus(str(payment_status)) from None
        total = booking.pricing.total

        if not (0 <= deposit_amount <= total):
            raise InvalidAmount(deposit_amount, total)

        logger.info(
            f"Payment change {booking.booking_reference}: "
            f"{payment_status.value} ${deposit_amount:.2f}"
        )

        result = await self.booking_api.update_booking_payment(
            booking.id,
            payment_status,
            deposit_amount,
        )
        if not result.success:
            logger.warning(
                f"Payment change {booking.booking_reference} failed: {result.error_message}"
            )
        return self._accepted(result, "Payment updated successfully")

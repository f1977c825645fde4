"""
Booking API Abstract Base Class

Defines the contract for reading bookings from, and requesting changes on,
the booking service that owns them. Both InMemoryBookingAPI and
HttpBookingAPI implement this interface, so the controller and the HTTP layer
work the same whichever one the factory hands out.

Provider failures (network errors, rejected requests, unreadable payloads)
are returned as unsuccessful results rather than raised.

Author: Khalil Bannouri
Version: 1.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from catering.models import Booking, BookingStatus, PaymentStatus


@dataclass
class BookingApiResult:
    """
    Result of a single-booking request.

    Attributes:
        success: Whether the booking service accepted the request
        booking: Updated or fetched booking on success
        message: Message returned by the service
        error_message: Error description if the request failed
        status_code: HTTP status of the response, when there was one
    """
    success: bool
    booking: Optional[Booking] = None
    message: Optional[str] = None
    error_message: Optional[str] = None
    status_code: Optional[int] = None


@dataclass
class BookingListResult:
    """Result of a booking list request."""
    success: bool
    bookings: list[Booking] = field(default_factory=list)
    error_message: Optional[str] = None


class BaseBookingAPI(ABC):
    """
    Abstract base class for booking API clients.

    Example:
        >>> api = get_booking_api()  # In-memory or HTTP
        >>> result = await api.update_booking_status("64f1...", BookingStatus.CONFIRMED)
        >>> if result.success:
        ...     print(result.booking.status)
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name (e.g. "memory", "http")."""
        pass

    @abstractmethod
    async def fetch_bookings(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> BookingListResult:
        """
        Fetch bookings whose delivery date falls in [start_date, end_date).

        Either bound may be omitted.
        """
        pass

    @abstractmethod
    async def get_booking(self, booking_id: str) -> BookingApiResult:
        """Fetch one booking by id."""
        pass

    @abstractmethod
    async def update_booking_status(
        self,
        booking_id: str,
        status: BookingStatus,
        notes: Optional[str] = None,
        cancellation_reason: Optional[str] = None,
    ) -> BookingApiResult:
        """
        Ask the booking service to change a booking's status.

        Args:
            booking_id: Internal booking id
            status: New status
            notes: Admin notes stored with the change
            cancellation_reason: Required by callers when status is cancelled
        """
        pass

    @abstractmethod
    async def update_booking_payment(
        self,
        booking_id: str,
        payment_status: PaymentStatus,
        deposit_amount: float,
    ) -> BookingApiResult:
        """Ask the booking service to record a payment change."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check connectivity to the booking service."""
        pass

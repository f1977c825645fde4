"""
Notification Service Abstract Base Class

Defines interface for sending booking SMS and Email notifications.
Supports both Mock (development) and Real (production) implementations.

Notifications follow a change that the booking service already accepted;
a failed notification is reported in its result and never undoes that change.

Author: Khalil Bannouri
Version: 1.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timezone
from typing import Optional
from zoneinfo import ZoneInfo

from catering.core.config import get_settings
from catering.models import Booking, BookingStatus

STATUS_HEADLINES = {
    BookingStatus.PENDING: "has been received",
    BookingStatus.CONFIRMED: "is confirmed",
    BookingStatus.PREPARING: "is being prepared",
    BookingStatus.READY: "is ready",
    BookingStatus.COMPLETED: "is complete. Thank you for choosing us",
    BookingStatus.CANCELLED: "has been cancelled",
}


@dataclass
class NotificationResult:
    """Result from sending a notification."""
    success: bool
    message_id: Optional[str] = None
    error_message: Optional[str] = None
    provider: str = "unknown"


def format_event_time(booking: Booking) -> str:
    """Short local event date/time for SMS, e.g. '14 Mar 06:30 PM'."""
    delivery = booking.delivery_date
    if delivery is None:
        return "date to be confirmed"
    if delivery.tzinfo is None:
        delivery = delivery.replace(tzinfo=timezone.utc)
    return delivery.astimezone(ZoneInfo(get_settings().timezone)).strftime("%d %b %I:%M %p")


def booking_confirmation_sms(booking: Booking) -> str:
    settings = get_settings()
    return (
        f"Booking confirmed! Ref: {booking.booking_reference}. "
        f"Date: {format_event_time(booking)}. "
        f"Amount: ${booking.pricing.total:.2f}. "
        f"Bank details sent via email. - {settings.company_name}"
    )


def status_update_message(booking: Booking) -> str:
    settings = get_settings()
    headline = STATUS_HEADLINES.get(booking.status, f"is now {booking.status.value}")
    message = f"Hi {booking.customer_details.name or 'there'}, your booking {booking.booking_reference} {headline}."
    if booking.status == BookingStatus.CANCELLED and booking.cancellation_reason:
        message += f" Reason: {booking.cancellation_reason}."
    elif booking.status != BookingStatus.CANCELLED and booking.delivery_date is not None:
        message += f" {booking.delivery_type.value if booking.delivery_type else 'Event'}: {format_event_time(booking)}."
    return f"{message} - {settings.company_name}"


def admin_booking_sms(booking: Booking) -> str:
    return (
        f"New booking {booking.booking_reference}: {booking.customer_details.name}, "
        f"{booking.people_count} guests, {format_event_time(booking)}, "
        f"${booking.pricing.total:.2f}"
    )


class BaseNotificationService(ABC):
    """Abstract base class for notification services."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def send_sms(
        self,
        to_phone: str,
        message: str,
    ) -> NotificationResult:
        """Send an SMS message."""
        pass

    @abstractmethod
    async def send_email(
        self,
        to_email: str,
        subject: str,
        body_html: str,
        body_text: Optional[str] = None,
    ) -> NotificationResult:
        """Send an email."""
        pass

    @abstractmethod
    async def send_booking_confirmation(self, booking: Booking) -> NotificationResult:
        """Send booking confirmation to the customer and alert the admin."""
        pass

    @abstractmethod
    async def send_status_update(self, booking: Booking) -> NotificationResult:
        """Tell the customer their booking changed status."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check service connectivity."""
        pass

"""
Mock Notification Service

Simulates SMS and Email sending for development.
No actual messages are sent - just logged.

Author: Khalil Bannouri
Version: 1.0.0
"""

import asyncio
import random
import uuid
import logging
from typing import Optional

from catering.models import Booking
from catering.services.notifications.base import (
    BaseNotificationService,
    NotificationResult,
    admin_booking_sms,
    booking_confirmation_sms,
    status_update_message,
)
from catering.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class MockNotificationService(BaseNotificationService):
    """Mock notification service for development."""

    def __init__(self, failure_rate: float = 0.05, latency: float = 0.1):
        self.failure_rate = failure_rate
        self.latency = latency
        logger.info(f"MockNotificationService initialized (failure_rate={failure_rate:.0%})")

    @property
    def provider_name(self) -> str:
        return "mock"

    async def _simulate_latency(self) -> None:
        """Simulate network latency."""
        if self.latency > 0:
            await asyncio.sleep(random.uniform(0, self.latency))

    def _should_fail(self) -> bool:
        return random.random() < self.failure_rate

    async def send_sms(
        self,
        to_phone: str,
        message: str,
    ) -> NotificationResult:
        """Simulate sending SMS."""
        await self._simulate_latency()

        if self._should_fail():
            logger.warning(f"Mock SMS failed (simulated) to {to_phone}")
            return NotificationResult(
                success=False,
                error_message="Simulated SMS failure",
                provider="mock"
            )

        message_id = f"sms_mock_{uuid.uuid4().hex[:12]}"
        logger.info(f"Mock SMS sent to {to_phone}: {message[:50]}... (ID: {message_id})")

        return NotificationResult(
            success=True,
            message_id=message_id,
            provider="mock"
        )

    async def send_email(
        self,
        to_email: str,
        subject: str,
        body_html: str,
        body_text: Optional[str] = None,
    ) -> NotificationResult:
        """Simulate sending email."""
        await self._simulate_latency()

        if self._should_fail():
            logger.warning(f"Mock email failed (simulated) to {to_email}")
            return NotificationResult(
                success=False,
                error_message="Simulated email failure",
                provider="mock"
            )

        message_id = f"email_mock_{uuid.uuid4().hex[:12]}"
        logger.info(f"Mock email sent to {to_email}: {subject} (ID: {message_id})")

        return NotificationResult(
            success=True,
            message_id=message_id,
            provider="mock"
        )

    async def send_booking_confirmation(self, booking: Booking) -> NotificationResult:
        """Send booking confirmation."""
        customer = booking.customer_details
        message = booking_confirmation_sms(booking)

        sms_result = None
        if customer.phone:
            sms_result = await self.send_sms(customer.phone, message)

        email_result = None
        if customer.email:
            email_result = await self.send_email(
                to_email=customer.email,
                subject=f"Booking Confirmation {booking.booking_reference} - {settings.company_name}",
                body_html=f"<h1>Booking Confirmed!</h1><p>{message}</p>",
                body_text=message
            )

        if settings.admin_phone:
            await self.send_sms(settings.admin_phone, admin_booking_sms(booking))

        return NotificationResult(
            success=bool(
                (sms_result and sms_result.success)
                or (email_result and email_result.success)
            ),
            message_id=sms_result.message_id if sms_result else None,
            provider="mock"
        )

    async def send_status_update(self, booking: Booking) -> NotificationResult:
        """Send status update."""
        customer = booking.customer_details
        message = status_update_message(booking)

        sms_result = None
        if customer.phone:
            sms_result = await self.send_sms(customer.phone, message)

        email_result = None
        if customer.email:
            email_result = await self.send_email(
                to_email=customer.email,
                subject=f"Booking {booking.booking_reference} - {booking.status.value.title()}",
                body_html=f"<p>{message}</p>",
                body_text=message
            )

        return NotificationResult(
            success=bool(
                (sms_result and sms_result.success)
                or (email_result and email_result.success)
            ),
            message_id=sms_result.message_id if sms_result else None,
            provider="mock"
        )

    async def health_check(self) -> bool:
        """Mock always returns healthy."""
        return True

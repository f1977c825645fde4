"""
Real Notification Service

Production implementation using:
- Twilio for SMS
- SendGrid for Email

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from typing import Optional

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail
from twilio.rest import Client as TwilioClient
from twilio.base.exceptions import TwilioException

from catering.models import Booking, BookingStatus
from catering.services.notifications.base import (
    BaseNotificationService,
    NotificationResult,
    admin_booking_sms,
    booking_confirmation_sms,
    format_event_time,
    status_update_message,
)
from catering.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class RealNotificationService(BaseNotificationService):
    """Production notification service using Twilio and SendGrid."""

    def __init__(self):
        # Initialize Twilio
        if settings.twilio_account_sid and settings.twilio_auth_token:
            self.twilio_client = TwilioClient(
                settings.twilio_account_sid,
                settings.twilio_auth_token
            )
            self.twilio_from_number = settings.twilio_phone_number
        else:
            self.twilio_client = None
            logger.warning("Twilio credentials not configured")

        # Initialize SendGrid
        if settings.sendgrid_api_key:
            self.sendgrid_client = SendGridAPIClient(settings.sendgrid_api_key)
            self.sendgrid_from_email = settings.sendgrid_from_email
        else:
            self.sendgrid_client = None
            logger.warning("SendGrid credentials not configured")

        logger.info("RealNotificationService initialized")

    @property
    def provider_name(self) -> str:
        return "real"

    async def send_sms(
        self,
        to_phone: str,
        message: str,
    ) -> NotificationResult:
        """Send SMS via Twilio."""
        if not self.twilio_client:
            return NotificationResult(
                success=False,
                error_message="Twilio not configured",
                provider="twilio"
            )

        try:
            result = self.twilio_client.messages.create(
                body=message,
                from_=self.twilio_from_number,
                to=to_phone
            )

            logger.info(f"SMS sent to {to_phone}: {result.sid}")

            return NotificationResult(
                success=True,
                message_id=result.sid,
                provider="twilio"
            )

        except TwilioException as e:
            logger.error(f"Twilio error: {e}")
            return NotificationResult(
                success=False,
                error_message=str(e),
                provider="twilio"
            )

    async def send_email(
        self,
        to_email: str,
        subject: str,
        body_html: str,
        body_text: Optional[str] = None,
    ) -> NotificationResult:
        """Send email via SendGrid."""
        if not self.sendgrid_client:
            return NotificationResult(
                success=False,
                error_message="SendGrid not configured",
                provider="sendgrid"
            )

        try:
            message = Mail(
                from_email=self.sendgrid_from_email,
                to_emails=to_email,
                subject=subject,
                html_content=body_html,
                plain_text_content=body_text
            )

            response = self.sendgrid_client.send(message)

            logger.info(f"Email sent to {to_email}: {response.status_code}")

            return NotificationResult(
                success=response.status_code in [200, 201, 202],
                message_id=response.headers.get('X-Message-Id'),
                provider="sendgrid"
            )

        except Exception as e:
            # SendGrid surfaces HTTP failures as python_http_client errors
            logger.error(f"SendGrid error: {e}")
            return NotificationResult(
                success=False,
                error_message=str(e),
                provider="sendgrid"
            )

    async def send_booking_confirmation(self, booking: Booking) -> NotificationResult:
        """Send booking confirmation via SMS and email."""
        customer = booking.customer_details
        message = booking_confirmation_sms(booking)

        sms_result = None
        if customer.phone:
            sms_result = await self.send_sms(customer.phone, message)

        email_result = None
        if customer.email:
            email_html = f"""
            <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
                <h1 style="color: #b45309;">Booking Confirmed!</h1>
                <p>Hi {customer.name},</p>
                <p>Your booking <strong>{booking.booking_reference}</strong> has been received.</p>
                <div style="background: #f8f9fa; padding: 15px; border-radius: 8px; margin: 20px 0;">
                    <p><strong>{format_event_time(booking)}</strong> for {booking.people_count} guests</p>
                    <p>Total: <strong>${booking.pricing.total:.2f}</strong></p>
                </div>
                <p>Thank you for choosing {settings.company_name}!</p>
            </div>
            """
            email_result = await self.send_email(
                to_email=customer.email,
                subject=f"Booking Confirmation {booking.booking_reference} - {settings.company_name}",
                body_html=email_html,
                body_text=message
            )

        if settings.admin_phone:
            await self.send_sms(settings.admin_phone, admin_booking_sms(booking))
        if settings.admin_email:
            await self.send_email(
                to_email=settings.admin_email,
                subject=f"New Booking {booking.booking_reference}",
                body_html=f"<p>{admin_booking_sms(booking)}</p>",
                body_text=admin_booking_sms(booking),
            )

        return NotificationResult(
            success=bool(
                (sms_result and sms_result.success)
                or (email_result and email_result.success)
            ),
            message_id=sms_result.message_id if sms_result else None,
            provider="real"
        )

    async def send_status_update(self, booking: Booking) -> NotificationResult:
        """Send status change via SMS and email."""
        customer = booking.customer_details
        message = status_update_message(booking)

        sms_result = None
        if customer.phone:
            sms_result = await self.send_sms(customer.phone, message)

        email_result = None
        if customer.email:
            colour = "#b91c1c" if booking.status == BookingStatus.CANCELLED else "#047857"
            email_html = f"""
            <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
                <h1 style="color: {colour};">Booking {booking.status.value.title()}</h1>
                <p>{message}</p>
            </div>
            """
            email_result = await self.send_email(
                to_email=customer.email,
                subject=f"Booking {booking.booking_reference} - {booking.status.value.title()}",
                body_html=email_html,
                body_text=message
            )

        return NotificationResult(
            success=bool(
                (sms_result and sms_result.success)
                or (email_result and email_result.success)
            ),
            message_id=sms_result.message_id if sms_result else None,
            provider="real"
        )

    async def health_check(self) -> bool:
        """Both providers configured."""
        return self.twilio_client is not None and self.sendgrid_client is not None

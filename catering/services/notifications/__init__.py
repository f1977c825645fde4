"""
Notification Service Factory

Returns Mock or Real notification service based on ENV_MODE.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from functools import lru_cache

from catering.core.config import get_settings
from catering.models import Booking
from catering.services.notifications.base import (
    BaseNotificationService,
    NotificationResult,
)
from catering.services.notifications.mock import MockNotificationService

logger = logging.getLogger(__name__)


@lru_cache()
def get_notification_service() -> BaseNotificationService:
    """Get the configured notification service."""
    settings = get_settings()

    if settings.is_development:
        logger.info("Notification Service: Using MockNotificationService (development mode)")
        return MockNotificationService(failure_rate=settings.mock_notification_failure_rate)

    # Twilio/SendGrid are only imported when real delivery is configured
    from catering.services.notifications.real import RealNotificationService

    logger.info(f"Notification Service: Using RealNotificationService ({settings.env_mode.value} mode)")
    return RealNotificationService()


def reset_notification_service() -> None:
    """Clear the cached service instance."""
    get_notification_service.cache_clear()


async def dispatch_status_notification(
    service: BaseNotificationService,
    booking: Booking,
) -> None:
    """
    Notify the customer about a status change that already succeeded.

    Delivery problems are logged and dropped; the status change stands.
    """
    try:
        result = await service.send_status_update(booking)
    except Exception:
        logger.exception(f"Status notification for {booking.booking_reference} raised")
        return

    if result.success:
        logger.info(f"Status notification sent for {booking.booking_reference}")
    else:
        logger.warning(
            f"Status notification for {booking.booking_reference} failed: {result.error_message}"
        )


__all__ = [
    "get_notification_service",
    "reset_notification_service",
    "dispatch_status_notification",
    "BaseNotificationService",
    "NotificationResult",
    "MockNotificationService",
]

"""
Booking API Factory

Returns the in-memory or HTTP booking API client based on ENV_MODE.

Environment Switching:
    - ENV_MODE=development → InMemoryBookingAPI (seeded sample bookings)
    - ENV_MODE=staging → HttpBookingAPI (staging booking service)
    - ENV_MODE=production → HttpBookingAPI (live booking service)

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from functools import lru_cache

from catering.core.config import get_settings
from catering.services.booking_api.base import (
    BaseBookingAPI,
    BookingApiResult,
    BookingListResult,
)
from catering.services.booking_api.http import HttpBookingAPI
from catering.services.booking_api.mock import InMemoryBookingAPI, sample_bookings

logger = logging.getLogger(__name__)


@lru_cache()
def get_booking_api() -> BaseBookingAPI:
    """
    Get the configured booking API client.

    The instance is cached so the in-memory store keeps its state across
    requests in development.
    """
    settings = get_settings()

    if settings.is_development:
        logger.info("Booking API: Using InMemoryBookingAPI (development mode)")
        return InMemoryBookingAPI(sample_bookings())

    logger.info(f"Booking API: Using HttpBookingAPI ({settings.env_mode.value} mode)")
    return HttpBookingAPI()


def reset_booking_api() -> None:
    """Clear the cached client instance."""
    get_booking_api.cache_clear()
    logger.debug("Booking API cache cleared")


__all__ = [
    "get_booking_api",
    "reset_booking_api",
    "BaseBookingAPI",
    "BookingApiResult",
    "BookingListResult",
    "HttpBookingAPI",
    "InMemoryBookingAPI",
    "sample_bookings",
]

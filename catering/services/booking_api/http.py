"""
HTTP Booking API Client

Production implementation talking to the booking service over REST.
Used when ENV_MODE=production or ENV_MODE=staging.

Endpoints:
    GET   /api/bookings               list (startDate, endDate, limit)
    GET   /api/bookings/{id}          single booking
    PATCH /api/bookings/{id}/status   status change
    PATCH /api/bookings/{id}/payment  payment change

Responses use the envelope ``{"success", "message", "data"}``.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from datetime import datetime
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from catering.core.config import get_settings
from catering.models import Booking, BookingStatus, PaymentStatus
from catering.services.booking_api.base import (
    BaseBookingAPI,
    BookingApiResult,
    BookingListResult,
)

logger = logging.getLogger(__name__)


class HttpBookingAPI(BaseBookingAPI):
    """
    Booking API client over httpx.

    Args:
        base_url: Booking service root (defaults to BOOKING_API_BASE_URL)
        token: Bearer token for admin endpoints (defaults to BOOKING_API_TOKEN)
        timeout: Request timeout in seconds
        transport: Optional httpx transport, used by tests

    Example:
        >>> api = HttpBookingAPI()
        >>> result = await api.fetch_bookings(start, end)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()

        self.base_url = (base_url or settings.booking_api_base_url).rstrip("/")
        self.token = token if token is not None else settings.booking_api_token
        self.timeout = timeout or settings.booking_api_timeout
        self.fetch_limit = settings.booking_fetch_limit
        self._transport = transport

        if not self.token:
            logger.warning("Booking API token not configured")

        logger.info(f"HttpBookingAPI initialized ({self.base_url})")

    @property
    def provider_name(self) -> str:
        return "http"

    def _client(self) -> httpx.AsyncClient:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=self._transport,
        )

    @staticmethod
    def _error_message(response: httpx.Response, fallback: str) -> str:
        """Prefer the service's own message, like the admin UI does."""
        try:
            body = response.json()
        except ValueError:
            return fallback
        if isinstance(body, dict):
            if body.get("message"):
                return str(body["message"])
            errors = body.get("errors")
            if isinstance(errors, list) and errors:
                return str(errors[0])
        return fallback

    async def _request(
        self,
        method: str,
        url: str,
        fallback_error: str,
        **kwargs: Any,
    ) -> tuple[Optional[dict], Optional[str], Optional[int]]:
        """
        Send a request and unwrap the response envelope.

        Returns:
            (body, error_message, status_code); body is None on failure
        """
        try:
            async with self._client() as client:
                response = await client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Booking API timeout on {method} {url}: {e}")
            return None, "Booking service timed out", None
        except httpx.RequestError as e:
            logger.error(f"Booking API transport error on {method} {url}: {e}")
            return None, f"Booking service unreachable: {e}", None

        if response.is_error:
            message = self._error_message(response, fallback_error)
            logger.error(f"Booking API {response.status_code} on {method} {url}: {message}")
            return None, message, response.status_code

        try:
            body = response.json()
        except ValueError:
            logger.error(f"Booking API returned non-JSON body on {method} {url}")
            return None, "Invalid response from booking service", response.status_code

        if not isinstance(body, dict) or body.get("success") is False:
            message = self._error_message(response, fallback_error)
            return None, message, response.status_code

        return body, None, response.status_code

    def _booking_result(
        self,
        body: Optional[dict],
        error: Optional[str],
        status_code: Optional[int],
    ) -> BookingApiResult:
        if body is None:
            return BookingApiResult(success=False, error_message=error, status_code=status_code)

        data = body.get("data") or {}
        raw = data.get("booking") if isinstance(data, dict) else None
        booking = None
        if raw is not None:
            try:
                booking = Booking.model_validate(raw)
            except ValidationError as e:
                logger.error(f"Unreadable booking in response: {e}")
                return BookingApiResult(
                    success=False,
                    error_message="Invalid booking data from booking service",
                    status_code=status_code,
                )

        return BookingApiResult(
            success=True,
            booking=booking,
            message=body.get("message"),
            status_code=status_code,
        )

    async def fetch_bookings(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> BookingListResult:
        params: dict[str, Any] = {
            "limit": self.fetch_limit,
            "sortBy": "deliveryDate",
            "sortOrder": "asc",
        }
        if start_date is not None:
            params["startDate"] = start_date.isoformat()
        if end_date is not None:
            params["endDate"] = end_date.isoformat()

        body, error, _ = await self._request(
            "GET", "/api/bookings", "Failed to fetch bookings", params=params
        )
        if body is None:
            return BookingListResult(success=False, error_message=error)

        data = body.get("data") or {}
        raw_bookings = data.get("bookings", []) if isinstance(data, dict) else data

        bookings = []
        skipped = 0
        for raw in raw_bookings or []:
            try:
                bookings.append(Booking.model_validate(raw))
            except ValidationError as e:
                skipped += 1
                ref = raw.get("bookingReference") if isinstance(raw, dict) else None
                logger.warning(f"Skipping unreadable booking {ref or '?'}: {e}")

        if skipped:
            logger.warning(f"Skipped {skipped} unreadable bookings from booking service")
        logger.debug(f"Fetched {len(bookings)} bookings")
        return BookingListResult(success=True, bookings=bookings)

    async def get_booking(self, booking_id: str) -> BookingApiResult:
        body, error, status_code = await self._request(
            "GET", f"/api/bookings/{booking_id}", "Failed to fetch booking"
        )
        return self._booking_result(body, error, status_code)

    async def update_booking_status(
        self,
        booking_id: str,
        status: BookingStatus,
        notes: Optional[str] = None,
        cancellation_reason: Optional[str] = None,
    ) -> BookingApiResult:
        payload: dict[str, Any] = {"status": BookingStatus(status).value}
        if notes:
            payload["adminNotes"] = notes
        if cancellation_reason:
            payload["cancellationReason"] = cancellation_reason

        body, error, status_code = await self._request(
            "PATCH",
            f"/api/bookings/{booking_id}/status",
            "Failed to update booking status",
            json=payload,
        )
        return self._booking_result(body, error, status_code)

    async def update_booking_payment(
        self,
        booking_id: str,
        payment_status: PaymentStatus,
        deposit_amount: float,
    ) -> BookingApiResult:
        payload = {
            "paymentStatus": PaymentStatus(payment_status).value,
            "depositAmount": deposit_amount,
        }

        body, error, status_code = await self._request(
            "PATCH",
            f"/api/bookings/{booking_id}/payment",
            "Failed to update payment status",
            json=payload,
        )
        return self._booking_result(body, error, status_code)

    async def health_check(self) -> bool:
        """Booking service answers a minimal list request."""
        body, _, _ = await self._request(
            "GET", "/api/bookings", "Health check failed", params={"limit": 1}
        )
        return body is not None

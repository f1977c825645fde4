"""
In-Memory Booking API

Stands in for the booking service in development mode (ENV_MODE=development):
    - Serves a seeded set of sample bookings
    - Applies status/payment updates to its own store, like the real service
    - Simulates response latency and, optionally, random failures

Author: Khalil Bannouri
Version: 1.0.0
"""

import asyncio
import logging
import random
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Optional

from catering.models import Booking, BookingStatus, PaymentStatus
from catering.services.booking_api.base import (
    BaseBookingAPI,
    BookingApiResult,
    BookingListResult,
)

logger = logging.getLogger(__name__)


class InMemoryBookingAPI(BaseBookingAPI):
    """
    Booking API backed by a dict of bookings.

    Attributes:
        failure_rate: Probability of a simulated service failure (0.0-1.0)
        min_latency: Minimum simulated response time in seconds
        max_latency: Maximum simulated response time in seconds

    Example:
        >>> api = InMemoryBookingAPI(sample_bookings(), min_latency=0, max_latency=0)
        >>> result = await api.fetch_bookings()
        >>> len(result.bookings)
        6
    """

    def __init__(
        self,
        bookings: Optional[Iterable[Any]] = None,
        failure_rate: float = 0.0,
        min_latency: float = 0.05,
        max_latency: float = 0.15,
    ):
        self.failure_rate = failure_rate
        self.min_latency = min_latency
        self.max_latency = max_latency
        self._bookings: dict[str, Booking] = {}

        for raw in bookings or []:
            booking = raw if isinstance(raw, Booking) else Booking.model_validate(raw)
            if not booking.id:
                booking = booking.model_copy(update={"id": uuid.uuid4().hex[:24]})
            self._bookings[booking.id] = booking

        logger.info(
            f"InMemoryBookingAPI initialized "
            f"({len(self._bookings)} bookings, failure_rate={failure_rate:.0%})"
        )

    @property
    def provider_name(self) -> str:
        return "memory"

    async def _simulate_latency(self) -> None:
        if self.max_latency > 0:
            await asyncio.sleep(random.uniform(self.min_latency, self.max_latency))

    def _should_fail(self) -> bool:
        return random.random() < self.failure_rate

    def _in_range(
        self,
        booking: Booking,
        start_date: Optional[datetime],
        end_date: Optional[datetime],
    ) -> bool:
        if start_date is None and end_date is None:
            return True
        delivery = booking.delivery_date
        if delivery is None:
            return False
        if delivery.tzinfo is None:
            delivery = delivery.replace(tzinfo=timezone.utc)
        if start_date is not None and delivery < _aware(start_date):
            return False
        if end_date is not None and delivery >= _aware(end_date):
            return False
        return True

    async def fetch_bookings(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> BookingListResult:
        await self._simulate_latency()

        if self._should_fail():
            logger.warning("Mock booking fetch failed (simulated)")
            return BookingListResult(success=False, error_message="Simulated booking service failure")

        bookings = [
            b for b in self._bookings.values()
            if self._in_range(b, start_date, end_date)
        ]
        logger.debug(f"Mock: fetched {len(bookings)} bookings")
        return BookingListResult(success=True, bookings=bookings)

    async def get_booking(self, booking_id: str) -> BookingApiResult:
        await self._simulate_latency()

        booking = self._bookings.get(booking_id)
        if booking is None:
            return BookingApiResult(
                success=False,
                error_message="Booking not found",
                status_code=404,
            )
        return BookingApiResult(success=True, booking=booking)

    async def update_booking_status(
        self,
        booking_id: str,
        status: BookingStatus,
        notes: Optional[str] = None,
        cancellation_reason: Optional[str] = None,
    ) -> BookingApiResult:
        await self._simulate_latency()

        booking = self._bookings.get(booking_id)
        if booking is None:
            return BookingApiResult(success=False, error_message="Booking not found", status_code=404)

        if self._should_fail():
            logger.warning(f"Mock status update failed (simulated) for {booking.booking_reference}")
            return BookingApiResult(
                success=False,
                error_message="Failed to update booking status",
                status_code=500,
            )

        update: dict[str, Any] = {"status": BookingStatus(status)}
        if notes:
            update["admin_notes"] = notes
        if cancellation_reason:
            update["cancellation_reason"] = cancellation_reason

        updated = booking.model_copy(update=update)
        self._bookings[booking_id] = updated

        logger.info(f"Mock: {updated.booking_reference} status -> {updated.status.value}")
        return BookingApiResult(
            success=True,
            booking=updated,
            message="Booking status updated successfully",
            status_code=200,
        )

    async def update_booking_payment(
        self,
        booking_id: str,
        payment_status: PaymentStatus,
        deposit_amount: float,
    ) -> BookingApiResult:
        await self._simulate_latency()

        booking = self._bookings.get(booking_id)
        if booking is None:
            return BookingApiResult(success=False, error_message="Booking not found", status_code=404)

        if self._should_fail():
            logger.warning(f"Mock payment update failed (simulated) for {booking.booking_reference}")
            return BookingApiResult(
                success=False,
                error_message="Failed to update payment status",
                status_code=500,
            )

        updated = booking.model_copy(update={
            "payment_status": PaymentStatus(payment_status),
            "deposit_amount": deposit_amount,
        })
        self._bookings[booking_id] = updated

        logger.info(
            f"Mock: {updated.booking_reference} payment -> "
            f"{updated.payment_status.value} (${deposit_amount:.2f})"
        )
        return BookingApiResult(
            success=True,
            booking=updated,
            message="Payment status updated successfully",
            status_code=200,
        )

    async def health_check(self) -> bool:
        """Mock always returns healthy."""
        return True


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


# =============================================================================
# SAMPLE DATA
# =============================================================================

SAMPLE_CUSTOMERS = [
    ("Priya Sharma", "priya@example.com", "0412 345 678"),
    ("Tom Nguyen", "tom.nguyen@example.com", "0423 456 789"),
    ("Sarah Williams", "sarah.w@example.com", "0434 567 890"),
    ("Raj Patel", "raj.patel@example.com", "0445 678 901"),
    ("Emma Brown", "emma.b@example.com", "0456 789 012"),
    ("Ali Hassan", "ali.h@example.com", "0467 890 123"),
]

SAMPLE_ITEMS = [
    {"name": "Butter Chicken", "category": "mains", "type": "included", "allergens": ["dairy"]},
    {"name": "Vegetable Biryani", "category": "mains", "type": "included", "isVegetarian": True},
    {"name": "Samosa", "category": "entree", "type": "selected", "isVegetarian": True, "isVegan": True, "allergens": ["gluten"]},
    {"name": "Garlic Naan", "category": "sides", "type": "included", "isVegetarian": True, "allergens": ["gluten", "dairy"]},
    {"name": "Gulab Jamun", "category": "desserts", "type": "selected", "isVegetarian": True, "allergens": ["dairy"]},
    {"name": "Mango Lassi", "category": "addons", "type": "addon", "isVegetarian": True, "allergens": ["dairy"]},
]

SAMPLE_STATUSES = ["pending", "confirmed", "preparing", "ready", "completed", "cancelled"]


def sample_bookings(now: Optional[datetime] = None) -> list[dict[str, Any]]:
    """Generate a deterministic set of API-shaped bookings around today."""
    now = now or datetime.now(timezone.utc)
    bookings = []

    for index, (name, email, phone) in enumerate(SAMPLE_CUSTOMERS):
        status = SAMPLE_STATUSES[index]
        people = 20 + index * 10
        base_price = people * 25.0
        addons_price = 40.0 if index % 2 == 0 else 0.0
        total = base_price + addons_price
        is_custom = index % 3 == 2

        items = [dict(item) for item in SAMPLE_ITEMS[index % 2: index % 2 + 4]]
        if addons_price:
            items.append({**SAMPLE_ITEMS[-1], "quantity": 8})

        booking = {
            "_id": f"sample{index:020d}",
            "bookingReference": f"MC{now:%y%m}{index + 1:04d}",
            "status": status,
            "paymentStatus": "fully_paid" if status == "completed" else (
                "deposit_paid" if index % 2 else "pending"
            ),
            "pricing": {"basePrice": base_price, "addonsPrice": addons_price, "total": total},
            "depositAmount": total if status == "completed" else (round(total * 0.3, 2) if index % 2 else 0),
            "peopleCount": people,
            "deliveryType": "Delivery" if index % 2 else "Pickup",
            "deliveryDate": (now + timedelta(hours=6 + index * 3)).isoformat(),
            "orderDate": (now - timedelta(days=7 - index)).isoformat(),
            "customerDetails": {
                "name": name,
                "email": email,
                "phone": phone,
                "specialInstructions": "Please label vegetarian trays" if index == 1 else "",
                "dietaryRequirements": ["vegetarian"] if index == 1 else [],
                "spiceLevel": "hot" if index == 3 else "medium",
            },
            "selectedItems": items,
            "orderSource": {
                "sourceType": "customOrder" if is_custom else "menu",
                "sourceName": "Custom Order" if is_custom else "Banquet Package",
                "locationName": "Canberra - Mawson" if index % 3 == 1 else "Sydney - Campsie",
                "serviceName": "Event Catering",
            },
        }
        if index % 2:
            booking["address"] = {
                "street": f"{10 + index} King St",
                "suburb": "Newtown",
                "state": "NSW",
                "postcode": "2042",
            }
        if status == "cancelled":
            booking["cancellationReason"] = "Event postponed"
        bookings.append(booking)

    return bookings

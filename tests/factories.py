"""Builders for booking test data."""

import itertools
from datetime import datetime, timezone
from typing import Any

from catering.models import Booking

_sequence = itertools.count(1)

# 6:30 PM in Sydney (AEDT, UTC+11)
DEFAULT_DELIVERY = datetime(2025, 3, 14, 7, 30, tzinfo=timezone.utc)


def make_item(name: str = "Butter Chicken", **overrides: Any) -> dict[str, Any]:
    item = {
        "name": name,
        "category": "mains",
        "type": "included",
        "quantity": None,
        "is_vegetarian": False,
        "is_vegan": False,
        "allergens": [],
    }
    item.update(overrides)
    return item


def make_booking(**overrides: Any) -> Booking:
    """Booking with sensible defaults; keyword arguments use field names."""
    n = next(_sequence)
    total = overrides.pop("total", 100.0)
    data: dict[str, Any] = {
        "id": f"booking{n:06d}",
        "booking_reference": f"MC2503{n:04d}",
        "status": "pending",
        "payment_status": "pending",
        "pricing": {"base_price": total, "addons_price": 0.0, "total": total},
        "deposit_amount": 0.0,
        "people_count": 10,
        "delivery_type": "Pickup",
        "delivery_date": DEFAULT_DELIVERY,
        "order_date": datetime(2025, 3, 1, 0, 0, tzinfo=timezone.utc),
        "customer_details": {
            "name": f"Customer {n}",
            "email": f"customer{n}@example.com",
            "phone": f"0400 000 {n:03d}",
        },
        "selected_items": [],
        "order_source": {
            "source_type": "menu",
            "source_name": "Banquet Package",
            "location_name": "Sydney - Campsie",
            "service_name": "Event Catering",
        },
    }
    data.update(overrides)
    return Booking.model_validate(data)

"""
Print Surface

Plain-text customer receipts and kitchen dockets for a single booking,
rendered from the Jinja2 templates in ``catering/templates``.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from jinja2 import Environment, PackageLoader, StrictUndefined

from catering.core.config import get_settings
from catering.models import Booking
from catering.services.kitchen import kitchen_items_for_booking
from catering.services.pricing import calculate_payment_summary

logger = logging.getLogger(__name__)

# Branch details keyed by the words that identify them in a location name
BRANCHES = {
    "canberra": {
        "keywords": ("canberra", "mawson"),
        "name_suffix": "Canberra",
        "address": "4/118 Mawson Pl, Mawson ACT 2607, Australia",
        "city": "Canberra",
    },
    "sydney": {
        "keywords": ("sydney", "campsie"),
        "name_suffix": "Sydney",
        "address": "66 Evaline St, Campsie NSW 2194, Australia",
        "city": "Sydney",
    },
}
DEFAULT_BRANCH = "sydney"

_env = Environment(
    loader=PackageLoader("catering", "templates"),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    undefined=StrictUndefined,
)


# =============================================================================
# FORMATTERS
# =============================================================================

def format_price(amount: Optional[float]) -> str:
    """Format an amount the way receipts show it, e.g. ``$1,234.50``."""
    amount = amount or 0.0
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def _as_aware(value: datetime) -> datetime:
    # Naive timestamps from the booking service are UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def format_datetime(value: Optional[datetime], tz: Optional[str] = None) -> str:
    """Local date and time, e.g. ``14 Mar 2025, 06:30 PM``."""
    if value is None:
        return "N/A"
    zone = ZoneInfo(tz or get_settings().timezone)
    return _as_aware(value).astimezone(zone).strftime("%d %b %Y, %I:%M %p")


def location_details(booking: Booking) -> dict:
    """Branch printed on the receipt, chosen from the order source location."""
    settings = get_settings()
    location = booking.order_source.location_name.lower()

    branch = BRANCHES[DEFAULT_BRANCH]
    for candidate in BRANCHES.values():
        if any(word in location for word in candidate["keywords"]):
            branch = candidate
            break

    return {
        "name": f"{settings.company_name} {branch['name_suffix']}",
        "address": branch["address"],
        "city": branch["city"],
        "phone": settings.company_phone,
        "email": settings.company_email,
        "website": settings.company_website,
    }


def is_urgent(
    booking: Booking,
    now: Optional[datetime] = None,
    window_hours: Optional[int] = None,
) -> bool:
    """True when delivery is still ahead but inside the urgent window."""
    if booking.delivery_date is None:
        return False
    if window_hours is None:
        window_hours = get_settings().urgent_window_hours
    now = _as_aware(now or datetime.now(timezone.utc))

    hours = (_as_aware(booking.delivery_date) - now).total_seconds() / 3600
    return 0 < hours <= window_hours


def dietary_alerts(booking: Booking) -> list[str]:
    """Dietary requirements plus any spice level other than the default."""
    customer = booking.customer_details
    alerts = [req for req in customer.dietary_requirements if req and req.strip()]
    if customer.spice_level and customer.spice_level != "medium":
        alerts.append(f"Spice level: {customer.spice_level.upper()}")
    return alerts


_env.filters["price"] = format_price
_env.filters["datetime"] = format_datetime


# =============================================================================
# RENDERERS
# =============================================================================

def render_receipt(booking: Booking, now: Optional[datetime] = None) -> str:
    """Customer receipt for a booking."""
    template = _env.get_template("receipt.txt.j2")
    text = template.render(
        booking=booking,
        branch=location_details(booking),
        lines=kitchen_items_for_booking(booking),
        summary=calculate_payment_summary(booking),
        currency=get_settings().currency,
        printed_at=now or datetime.now(timezone.utc),
    )
    logger.debug(f"Rendered receipt for {booking.booking_reference}")
    return text


def render_kitchen_docket(booking: Booking, now: Optional[datetime] = None) -> str:
    """Kitchen docket for a booking: what to make, for whom, and when."""
    now = now or datetime.now(timezone.utc)
    template = _env.get_template("kitchen_docket.txt.j2")
    text = template.render(
        booking=booking,
        urgent=is_urgent(booking, now),
        window_hours=get_settings().urgent_window_hours,
        alerts=dietary_alerts(booking),
        lines=kitchen_items_for_booking(booking),
        printed_at=now,
    )
    logger.debug(f"Rendered kitchen docket for {booking.booking_reference}")
    return text

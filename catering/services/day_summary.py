"""
Day Summary Builder

Guest, revenue and status totals for the bookings of one calendar day, plus
the grouping of a month's bookings into calendar days.
"""

from collections import defaultdict
from dataclasses import dataclass, field, asdict
from datetime import date, datetime, timezone
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from catering.models import Booking


@dataclass(frozen=True)
class DaySummary:
    """
    Totals for one day.

    People, revenue and paid amounts cover active (non-cancelled) bookings
    only; ``status_counts`` covers every booking of the day.
    """
    day: Optional[date]
    total_bookings: int
    active_bookings: int
    total_people: int
    total_revenue: float
    total_paid: float
    balance_due: float
    status_counts: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


def build_day_summary(bookings: Iterable[Booking], day: Optional[date] = None) -> DaySummary:
    """Summarize a day's bookings."""
    bookings = list(bookings)
    active = [b for b in bookings if b.is_active]

    total_people = sum(b.people_count for b in active)
    total_revenue = round(sum(b.pricing.total for b in active), 2)
    total_paid = round(sum(b.deposit_amount for b in active), 2)

    status_counts: dict[str, int] = {}
    for booking in bookings:
        status = booking.status.value
        status_counts[status] = status_counts.get(status, 0) + 1

    return DaySummary(
        day=day,
        total_bookings=len(bookings),
        active_bookings=len(active),
        total_people=total_people,
        total_revenue=total_revenue,
        total_paid=total_paid,
        balance_due=round(total_revenue - total_paid, 2),
        status_counts=status_counts,
    )


def booking_day(booking: Booking, tz: ZoneInfo) -> Optional[date]:
    """Calendar day of a booking's delivery in the business time zone."""
    delivery = booking.delivery_date
    if delivery is None:
        return None
    if delivery.tzinfo is None:
        delivery = delivery.replace(tzinfo=timezone.utc)
    return delivery.astimezone(tz).date()


def group_bookings_by_day(
    bookings: Iterable[Booking],
    tz: ZoneInfo,
) -> dict[date, list[Booking]]:
    """
    Bucket bookings by delivery day, keeping input order inside each day.

    Bookings without a delivery date are left out.
    """
    grouped: dict[date, list[Booking]] = defaultdict(list)
    for booking in bookings:
        day = booking_day(booking, tz)
        if day is not None:
            grouped[day].append(booking)
    return dict(sorted(grouped.items()))


def day_bounds(day: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """UTC start (inclusive) and end (exclusive) of a local calendar day."""
    start = datetime(day.year, day.month, day.day, tzinfo=tz)
    next_day = date.fromordinal(day.toordinal() + 1)
    end = datetime(next_day.year, next_day.month, next_day.day, tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def month_bounds(year: int, month: int, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """UTC start (inclusive) and end (exclusive) of a local calendar month."""
    start = datetime(year, month, 1, tzinfo=tz)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=tz)
    else:
        end = datetime(year, month + 1, 1, tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)

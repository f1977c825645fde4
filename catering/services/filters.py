"""
Booking Filter/Sort Engine

Applies the admin list filters (status, delivery type, order source, free
text) and a sort field to a booking collection. Filter settings are an
immutable ``BookingFilters`` value passed in on every call; nothing here
keeps state between calls or modifies the input list.

Facet counts annotate each filter option (e.g. "Confirmed (12)") and are
always computed from the unfiltered bookings so they stay stable while the
operator narrows the list.
"""

import enum
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Any, Iterable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_snake

from catering.models import Booking, BookingStatus, DeliveryType, SourceType

ALL = "all"


class BookingFilters(BaseModel):
    """
    List filters and sort order.

    Attributes:
        status: Booking status or "all"
        delivery_type: Pickup/Delivery/Event or "all"
        source_type: "menu", "customOrder" or "all"
        search: Case-insensitive text matched against customer and booking fields
        sort_by: Field path, e.g. "deliveryDate", "pricing.total", "customerDetails.name"
        sort_order: "asc" or "desc"
    """

    model_config = ConfigDict(frozen=True)

    status: str = ALL
    delivery_type: str = ALL
    source_type: str = ALL
    search: str = ""
    sort_by: str = "deliveryDate"
    sort_order: Literal["asc", "desc"] = "asc"

    @field_validator("status", "delivery_type", "source_type", mode="before")
    @classmethod
    def default_to_all(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return ALL
        if isinstance(v, enum.Enum):
            return v.value
        return v

    @field_validator("search", mode="before")
    @classmethod
    def default_search(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("sort_order", mode="before")
    @classmethod
    def lower_sort_order(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v


@dataclass(frozen=True)
class FacetCounts:
    """Per-option counts over the unfiltered bookings."""
    status: dict[str, int] = field(default_factory=dict)
    delivery_type: dict[str, int] = field(default_factory=dict)
    source_type: dict[str, int] = field(default_factory=dict)


# =============================================================================
# FILTERING
# =============================================================================

def _matches_status(booking: Booking, status: str) -> bool:
    return status == ALL or booking.status.value == status


def _matches_delivery_type(booking: Booking, delivery_type: str) -> bool:
    if delivery_type == ALL:
        return True
    return booking.delivery_type is not None and booking.delivery_type.value == delivery_type


def _matches_source_type(booking: Booking, source_type: str) -> bool:
    if source_type == ALL:
        return True
    if source_type == SourceType.CUSTOM_ORDER.value:
        return booking.is_custom_order
    if source_type == SourceType.MENU.value:
        return not booking.is_custom_order
    return False


def _search_fields(booking: Booking) -> tuple[str, ...]:
    customer = booking.customer_details
    source = booking.order_source
    return (
        customer.name,
        customer.email,
        customer.phone,
        booking.booking_reference,
        source.source_name,
        source.location_name,
        source.service_name,
    )


def _matches_search(booking: Booking, search: str) -> bool:
    term = search.strip().lower()
    if not term:
        return True
    return any(term in (value or "").lower() for value in _search_fields(booking))


def matches_filters(booking: Booking, filters: BookingFilters) -> bool:
    return (
        _matches_status(booking, filters.status)
        and _matches_delivery_type(booking, filters.delivery_type)
        and _matches_source_type(booking, filters.source_type)
        and _matches_search(booking, filters.search)
    )


def filter_bookings(bookings: Iterable[Booking], filters: BookingFilters) -> list[Booking]:
    return [b for b in bookings if matches_filters(b, filters)]


# =============================================================================
# SORTING
# =============================================================================

def resolve_field(obj: Any, path: str) -> Any:
    """
    Read a dotted field path from a booking.

    Segments may be camelCase (API naming) or snake_case. Missing segments
    resolve to None.
    """
    value = obj
    for segment in path.split("."):
        if value is None:
            return None
        name = to_snake(segment)
        if isinstance(value, dict):
            value = value.get(segment, value.get(name))
        else:
            value = getattr(value, name, None)
    return value


def _sort_key(value: Any) -> tuple[int, Any]:
    """Group comparable kinds so mixed values never compare across kinds."""
    if isinstance(value, enum.Enum):
        value = value.value
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, (int, float)):
        return (0, float(value))
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return (1, value.timestamp())
    if isinstance(value, date):
        return (1, datetime.combine(value, time(), tzinfo=timezone.utc).timestamp())
    return (2, str(value))


def sort_bookings(
    bookings: Iterable[Booking],
    sort_by: str,
    sort_order: str = "asc",
) -> list[Booking]:
    """
    Stable sort by a field path.

    Bookings whose field is missing go last in either direction.
    """
    present: list[tuple[tuple[int, Any], Booking]] = []
    missing: list[Booking] = []

    for booking in bookings:
        value = resolve_field(booking, sort_by) if sort_by else None
        if value is None or value == "":
            missing.append(booking)
        else:
            present.append((_sort_key(value), booking))

    present.sort(key=lambda pair: pair[0], reverse=(sort_order == "desc"))
    return [booking for _, booking in present] + missing


def apply_filters(bookings: Iterable[Booking], filters: Optional[BookingFilters] = None) -> list[Booking]:
    """Filter then sort; returns a new list."""
    filters = filters or BookingFilters()
    filtered = filter_bookings(bookings, filters)
    return sort_bookings(filtered, filters.sort_by, filters.sort_order)


def paginate(bookings: list[Booking], skip: int = 0, limit: int = 10) -> list[Booking]:
    skip = max(skip, 0)
    return bookings[skip:skip + max(limit, 0)]


# =============================================================================
# FACETS
# =============================================================================

def compute_facet_counts(bookings: Iterable[Booking]) -> FacetCounts:
    """Count bookings per filter option over the full, unfiltered set."""
    bookings = list(bookings)
    total = len(bookings)

    status = {ALL: total, **{s.value: 0 for s in BookingStatus}}
    delivery_type = {ALL: total, **{d.value: 0 for d in DeliveryType}}
    custom = 0

    for booking in bookings:
        status[booking.status.value] += 1
        if booking.delivery_type is not None:
            delivery_type[booking.delivery_type.value] += 1
        if booking.is_custom_order:
            custom += 1

    source_type = {
        ALL: total,
        SourceType.MENU.value: total - custom,
        SourceType.CUSTOM_ORDER.value: custom,
    }

    return FacetCounts(status=status, delivery_type=delivery_type, source_type=source_type)

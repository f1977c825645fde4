"""
Kitchen Preparation Rollup

Consolidates the selected items of a day's active bookings into one line per
dish, so the kitchen sees how much of each dish to make and which booking
needs it first.

Items are identified by their trimmed, lower-cased name. The first booking
that contributes a dish supplies its descriptive fields (display name,
category, dietary flags, allergens); later contributions that disagree only
raise ``has_metadata_conflict`` so staff can check the individual bookings.
"""

from dataclasses import dataclass, field
from typing import Iterable, Union

from catering.models import Booking, BookingStatus, SelectedItem
from catering.services.status_policy import more_urgent, priority_of


@dataclass(frozen=True)
class KitchenBookingRef:
    """One booking's contribution to an aggregated dish."""
    booking_id: str
    booking_reference: str
    customer_name: str
    quantity: Union[int, float]
    order_type: str
    status: BookingStatus


@dataclass
class AggregatedKitchenItem:
    """Preparation total for one dish across bookings."""
    key: str
    name: str
    category: str
    group_name: str
    is_addon: bool
    is_vegetarian: bool
    is_vegan: bool
    allergens: list[str]
    total_quantity: Union[int, float]
    total_people: int
    highest_priority_status: BookingStatus
    bookings: list[KitchenBookingRef] = field(default_factory=list)
    has_metadata_conflict: bool = False

    @property
    def booking_count(self) -> int:
        return len(self.bookings)


@dataclass(frozen=True)
class DocketLine:
    """A single item line on one booking's kitchen docket."""
    name: str
    category: str
    group_name: str
    quantity: Union[int, float]
    is_addon: bool
    is_vegetarian: bool
    is_vegan: bool
    allergens: list[str]
    notes: str

    @property
    def quantity_label(self) -> str:
        """Add-ons are counted; everything else is made per guest."""
        if self.is_addon and self.quantity > 1:
            return f"{self.quantity}x"
        return "per person"


def normalize_item_name(name) -> str:
    if not isinstance(name, str):
        return ""
    return name.strip().lower()


def _item_quantity(item: SelectedItem) -> Union[int, float]:
    return 1 if item.quantity is None else item.quantity


def _metadata_differs(entry: AggregatedKitchenItem, item: SelectedItem) -> bool:
    return (
        entry.category != item.category
        or entry.is_vegetarian != item.is_vegetarian
        or entry.is_vegan != item.is_vegan
        or sorted(entry.allergens) != sorted(item.allergens)
    )


def aggregate_kitchen_items(bookings: Iterable[Booking]) -> list[AggregatedKitchenItem]:
    """
    Build per-dish preparation totals for a set of bookings.

    Cancelled bookings contribute nothing. Items without a usable name are
    skipped. The result is ordered by the most urgent contributing status,
    then by descending total quantity; remaining ties keep first-seen order.

    Args:
        bookings: Bookings of a single day

    Returns:
        Fresh list of aggregated items; inputs are not modified
    """
    aggregated: dict[str, AggregatedKitchenItem] = {}

    for booking in bookings:
        if not booking.is_active:
            continue

        for item in booking.selected_items:
            key = normalize_item_name(item.name)
            if not key:
                continue

            quantity = _item_quantity(item)
            ref = KitchenBookingRef(
                booking_id=booking.id,
                booking_reference=booking.booking_reference,
                customer_name=booking.customer_details.name,
                quantity=quantity,
                order_type=booking.order_type_label,
                status=booking.status,
            )

            entry = aggregated.get(key)
            if entry is None:
                aggregated[key] = AggregatedKitchenItem(
                    key=key,
                    name=item.name.strip(),
                    category=item.category,
                    group_name=item.group_name,
                    is_addon=item.is_addon,
                    is_vegetarian=item.is_vegetarian,
                    is_vegan=item.is_vegan,
                    allergens=list(item.allergens),
                    total_quantity=quantity,
                    total_people=booking.people_count,
                    highest_priority_status=booking.status,
                    bookings=[ref],
                )
                continue

            entry.total_quantity += quantity
            entry.total_people += booking.people_count
            entry.bookings.append(ref)
            if more_urgent(booking.status, entry.highest_priority_status):
                entry.highest_priority_status = booking.status
            if not entry.has_metadata_conflict and _metadata_differs(entry, item):
                entry.has_metadata_conflict = True

    return sorted(
        aggregated.values(),
        key=lambda e: (priority_of(e.highest_priority_status), -e.total_quantity),
    )


def kitchen_items_for_booking(booking: Booking) -> list[DocketLine]:
    """Docket lines for a single booking, in booking order."""
    lines = []
    for item in booking.selected_items:
        if not normalize_item_name(item.name):
            continue
        lines.append(DocketLine(
            name=item.name.strip(),
            category=item.category,
            group_name=item.group_name,
            quantity=_item_quantity(item),
            is_addon=item.is_addon,
            is_vegetarian=item.is_vegetarian,
            is_vegan=item.is_vegan,
            allergens=list(item.allergens),
            notes=item.notes,
        ))
    return lines

"""
Booking Domain Models

Read-only snapshot of a catering booking as returned by the booking API.
Bookings are created and persisted by that service; this package only reads
them and asks the API for status and payment changes.

Every optional field carries one documented default. ``null`` values sent by
the API are replaced with that default while parsing, so the view logic can
read ``booking.pricing.total`` or ``booking.people_count`` without fallbacks.

Author: Khalil Bannouri
Version: 1.0.0
"""

import enum
import logging
import math
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


def _lenient_number(v: Any) -> Any:
    """Numbers and numeric strings pass through; anything else reads as missing."""
    if isinstance(v, bool) or v is None:
        return None
    if isinstance(v, str):
        try:
            v = float(v.strip())
        except ValueError:
            return None
    if not isinstance(v, (int, float)) or not math.isfinite(v):
        return None
    if isinstance(v, float) and v.is_integer():
        return int(v)
    return v


class BookingStatus(str, enum.Enum):
    """Booking lifecycle."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, enum.Enum):
    """Payment progress of a booking."""
    PENDING = "pending"
    DEPOSIT_PAID = "deposit_paid"
    FULLY_PAID = "fully_paid"


class DeliveryType(str, enum.Enum):
    """How the food leaves the kitchen."""
    PICKUP = "Pickup"
    DELIVERY = "Delivery"
    EVENT = "Event"


class SourceType(str, enum.Enum):
    """Where the selected items came from."""
    MENU = "menu"
    CUSTOM_ORDER = "customOrder"


class ApiModel(BaseModel):
    """Base for models read from the camelCase booking API."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("*", mode="before")
    @classmethod
    def drop_nulls(cls, v: Any, info) -> Any:
        """Replace ``null`` with the field default."""
        if v is None:
            field = cls.model_fields[info.field_name]
            if not field.is_required():
                return field.get_default(call_default_factory=True)
        return v


class Pricing(ApiModel):
    base_price: float = 0.0
    addons_price: float = 0.0
    total: float = 0.0


class CustomerDetails(ApiModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    special_instructions: str = ""
    dietary_requirements: list[str] = Field(default_factory=list)
    spice_level: str = "medium"


class Address(ApiModel):
    street: str = ""
    suburb: str = ""
    state: str = ""
    postcode: str = ""
    country: str = "Australia"


class OrderSource(ApiModel):
    source_type: SourceType = SourceType.MENU
    source_id: str = ""
    source_name: str = ""
    location_name: str = ""
    service_name: str = ""

    @field_validator("source_id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return v if v is None or isinstance(v, str) else str(v)


class SelectedItem(ApiModel):
    """One line of a booking's menu selection."""

    name: str = ""
    category: str = ""
    type: str = ""
    quantity: Optional[Union[int, float]] = None
    is_vegetarian: bool = False
    is_vegan: bool = False
    allergens: list[str] = Field(default_factory=list)
    group_name: str = ""
    total_price: Optional[float] = None
    notes: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def name_text(cls, v: Any) -> Any:
        # Items without a usable name are skipped downstream
        return v if isinstance(v, str) else ""

    @field_validator("category", "type", "group_name", "notes", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return ""

    @field_validator("quantity", "total_price", mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> Any:
        return _lenient_number(v)

    @field_validator("is_vegetarian", "is_vegan", mode="before")
    @classmethod
    def coerce_flag(cls, v: Any) -> Any:
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            return v.strip().lower() in ("true", "yes", "1")
        if isinstance(v, (int, float)):
            return v == 1
        return False

    @field_validator("allergens", mode="before")
    @classmethod
    def coerce_allergens(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, list):
            return []
        return [a for a in v if isinstance(a, str) and a.strip()]

    @property
    def is_addon(self) -> bool:
        return self.category == "addons" or self.type == "addon"


class AdminAddition(ApiModel):
    """Extra charge or item added by staff after booking."""

    name: str = ""
    price: float = 0.0
    quantity: int = 1
    notes: str = ""


class Booking(ApiModel):
    """
    A catering booking.

    Defaults:
        status: pending
        payment_status: pending
        pricing: all zero
        deposit_amount: 0
        people_count: 0
        selected_items, admin_additions: empty
        admin_notes: empty string
        delivery_type, delivery_date, order_date, address,
        cancellation_reason: None
    """

    id: str = Field(default="", validation_alias=AliasChoices("_id", "id"))
    booking_reference: str = ""
    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    pricing: Pricing = Field(default_factory=Pricing)
    deposit_amount: float = 0.0
    people_count: int = 0
    delivery_type: Optional[DeliveryType] = None
    delivery_date: Optional[datetime] = None
    order_date: Optional[datetime] = None
    customer_details: CustomerDetails = Field(default_factory=CustomerDetails)
    address: Optional[Address] = None
    selected_items: list[SelectedItem] = Field(default_factory=list)
    order_source: OrderSource = Field(default_factory=OrderSource)
    cancellation_reason: Optional[str] = None
    admin_notes: str = ""
    admin_additions: list[AdminAddition] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return v if v is None or isinstance(v, str) else str(v)

    @field_validator("delivery_type", "delivery_date", "order_date", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("selected_items", "admin_additions", mode="before")
    @classmethod
    def drop_malformed_entries(cls, v: Any, info) -> Any:
        """
        Keep only entries that parse as line items.

        One unreadable line is dropped on its own instead of failing the
        whole booking.
        """
        if not isinstance(v, list):
            return []
        model = SelectedItem if info.field_name == "selected_items" else AdminAddition

        entries = []
        for entry in v:
            if isinstance(entry, model):
                entries.append(entry)
                continue
            if not isinstance(entry, dict):
                continue
            try:
                entries.append(model.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"Dropping unreadable {info.field_name} entry: {e.error_count()} errors")
        return entries

    @property
    def is_active(self) -> bool:
        """Active bookings are every booking that is not cancelled."""
        return self.status != BookingStatus.CANCELLED

    @property
    def is_custom_order(self) -> bool:
        return self.order_source.source_type == SourceType.CUSTOM_ORDER

    @property
    def order_type_label(self) -> str:
        return "Custom" if self.is_custom_order else "Regular"

    def __repr__(self):
        return f"<Booking {self.booking_reference or self.id} - {self.status.value}>"

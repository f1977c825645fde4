"""
Pydantic Schemas for Request/Response Validation

Request bodies accept the booking service's camelCase names as well as
snake_case. Bookings inside responses keep the booking service's shape.

Author: Khalil Bannouri
Version: 1.0.0
"""

from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from catering.models import Booking, BookingStatus, PaymentStatus


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class StatusUpdateRequest(BaseModel):
    """Request to move a booking to another status."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Plain string so unknown values reach the transition check
    status: str = Field(..., examples=["confirmed"])
    admin_notes: Optional[str] = Field(None, max_length=2000)
    cancellation_reason: Optional[str] = Field(None, max_length=500)


class PaymentUpdateRequest(BaseModel):
    """Request to record a payment against a booking."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    payment_status: PaymentStatus = Field(..., examples=["deposit_paid"])
    deposit_amount: float = Field(..., examples=[150.0])


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class BookingChangeResponse(BaseModel):
    """Response after a status or payment change was accepted."""
    success: bool
    message: str
    booking: Optional[Booking] = None


class FacetCountsResponse(BaseModel):
    """Per-option counts for the list filters."""

    model_config = ConfigDict(from_attributes=True)

    status: dict[str, int]
    delivery_type: dict[str, int]
    source_type: dict[str, int]


class BookingListResponse(BaseModel):
    """Response for listing bookings."""
    total: int
    skip: int
    limit: int
    bookings: List[Booking]
    facets: FacetCountsResponse


class PaymentSummaryResponse(BaseModel):
    """Money view of one booking."""
    booking_id: str
    booking_reference: str
    total: float
    paid: float
    balance: float
    percent_paid: float
    is_overpaid: bool


class DaySummaryResponse(BaseModel):
    """Totals for one day."""

    model_config = ConfigDict(from_attributes=True)

    day: Optional[date]
    total_bookings: int
    active_bookings: int
    total_people: int
    total_revenue: float
    total_paid: float
    balance_due: float
    status_counts: dict[str, int]


class KitchenBookingRefResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    booking_id: str
    booking_reference: str
    customer_name: str
    quantity: Union[int, float]
    order_type: str
    status: BookingStatus


class KitchenItemResponse(BaseModel):
    """Preparation total for one dish."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    category: str
    group_name: str
    is_addon: bool
    is_vegetarian: bool
    is_vegan: bool
    allergens: List[str]
    total_quantity: Union[int, float]
    total_people: int
    booking_count: int
    highest_priority_status: BookingStatus
    has_metadata_conflict: bool
    bookings: List[KitchenBookingRefResponse]


class DayDetailResponse(BaseModel):
    """Everything the day view needs."""
    day: date
    summary: DaySummaryResponse
    kitchen_items: List[KitchenItemResponse]
    bookings: List[Booking]


class CalendarDayResponse(BaseModel):
    """One populated day of the month calendar."""
    day: date
    booking_count: int
    summary: DaySummaryResponse


class CalendarResponse(BaseModel):
    """Month calendar; days without bookings are omitted."""
    year: int
    month: int
    days: List[CalendarDayResponse]


class ExportResponse(BaseModel):
    """Response after queueing a spreadsheet export."""
    success: bool
    message: str
    count: int
    task_id: Optional[str] = None


class NotificationResponse(BaseModel):
    """Outcome of a customer notification sent on request."""
    success: bool
    provider: str
    message_id: Optional[str] = None
    error_message: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    booking_api: str
    redis: str
    notification_service: str
    timestamp: datetime

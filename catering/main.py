"""
FastAPI Application Entry Point

Catering Booking Admin - Hybrid Architecture
Runs against an in-memory booking store (development) or the live booking
service (staging/production).

Endpoints:
    - GET /api/bookings: Filtered, sorted, paginated bookings with facet counts
    - GET /api/bookings/{id}: Single booking
    - PATCH /api/bookings/{id}/status: Validated status change
    - PATCH /api/bookings/{id}/payment: Validated payment update
    - GET /api/bookings/{id}/receipt, /docket: Printable text
    - GET /api/days/{day}: Day summary and kitchen rollup
    - GET /api/calendar/{year}/{month}: Month overview
    - POST /api/bookings/export: Queue spreadsheet export
    - GET /health: System health check

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional
from contextlib import asynccontextmanager
from zoneinfo import ZoneInfo

from fastapi import BackgroundTasks, FastAPI, HTTPException, Depends, Path, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.middleware.cors import CORSMiddleware
import redis

# Internal imports
from catering.core.config import get_settings, setup_logging
from catering.exceptions import ApiError, BookingError
from catering.models import Booking
from catering.schemas import (
    BookingChangeResponse,
    BookingListResponse,
    CalendarDayResponse,
    CalendarResponse,
    DayDetailResponse,
    DaySummaryResponse,
    ErrorResponse,
    ExportResponse,
    FacetCountsResponse,
    HealthResponse,
    KitchenItemResponse,
    NotificationResponse,
    PaymentSummaryResponse,
    PaymentUpdateRequest,
    StatusUpdateRequest,
)
from catering.services.booking_api import BaseBookingAPI, get_booking_api
from catering.services.day_summary import (
    booking_day,
    build_day_summary,
    day_bounds,
    group_bookings_by_day,
    month_bounds,
)
from catering.services.excel_manager import booking_export_row
from catering.services.filters import (
    ALL,
    BookingFilters,
    apply_filters,
    compute_facet_counts,
    paginate,
    sort_bookings,
)
from catering.services.kitchen import aggregate_kitchen_items
from catering.services.notifications import (
    BaseNotificationService,
    dispatch_status_notification,
    get_notification_service,
)
from catering.services.pricing import calculate_payment_summary
from catering.services.printing import render_kitchen_docket, render_receipt
from catering.services.transitions import StatusTransitionController
from catering.tasks import export_bookings_to_excel

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    # Log service configuration
    booking_api = get_booking_api()
    notification_service = get_notification_service()
    logger.info(f"Booking API: {booking_api.provider_name}")
    logger.info(f"Notification Service: {notification_service.provider_name}")

    # Validate production config
    if settings.use_real_services:
        missing = settings.validate_production_config()
        if missing:
            logger.warning(f"Missing production config: {missing}")

    logger.info("Application ready!")

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Admin core for catering bookings: filtering, kitchen rollups, "
        "day summaries, validated status and payment changes, printing and export."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# DEPENDENCIES & HELPERS
# =============================================================================

def get_controller(
    booking_api: BaseBookingAPI = Depends(get_booking_api),
) -> StatusTransitionController:
    return StatusTransitionController(booking_api)


def list_filters(
    status: Optional[str] = Query(ALL),
    delivery_type: Optional[str] = Query(ALL, alias="deliveryType"),
    source_type: Optional[str] = Query(ALL, alias="sourceType"),
    search: Optional[str] = Query(""),
    sort_by: str = Query("deliveryDate", alias="sortBy"),
    sort_order: str = Query("asc", alias="sortOrder"),
) -> BookingFilters:
    """Filter and sort settings from the query string."""
    if sort_order.lower() not in ("asc", "desc"):
        raise HTTPException(status_code=422, detail="sortOrder must be asc or desc")
    return BookingFilters(
        status=status,
        delivery_type=delivery_type,
        source_type=source_type,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )


def business_tz() -> ZoneInfo:
    return ZoneInfo(settings.timezone)


async def fetch_range(
    booking_api: BaseBookingAPI,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> list[Booking]:
    result = await booking_api.fetch_bookings(start, end)
    if not result.success:
        logger.error(f"Booking fetch failed: {result.error_message}")
        raise ApiError(result.error_message or "Failed to fetch bookings")
    return result.bookings


async def fetch_for_dates(
    booking_api: BaseBookingAPI,
    start_date: Optional[date],
    end_date: Optional[date],
) -> list[Booking]:
    """Bookings delivered between two local calendar days, both inclusive."""
    tz = business_tz()
    start = day_bounds(start_date, tz)[0] if start_date else None
    end = day_bounds(end_date, tz)[1] if end_date else None
    return await fetch_range(booking_api, start, end)


async def load_booking(booking_api: BaseBookingAPI, booking_id: str) -> Booking:
    result = await booking_api.get_booking(booking_id)
    if result.success and result.booking is not None:
        return result.booking
    if result.status_code == 404:
        raise HTTPException(status_code=404, detail=f"Booking {booking_id} not found")
    raise ApiError(result.error_message or "Failed to load booking")


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "bookings": "/api/bookings",
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    booking_api: BaseBookingAPI = Depends(get_booking_api),
    notification_service: BaseNotificationService = Depends(get_notification_service),
) -> HealthResponse:
    """Verify all system components are operational."""

    # Check Redis
    redis_status = "healthy"
    try:
        r = redis.Redis.from_url(settings.redis_url, socket_timeout=2)
        r.ping()
        r.close()
    except redis.RedisError as e:
        redis_status = f"unhealthy: {str(e)}"
        logger.error(f"Redis health check failed: {e}")

    booking_status = "healthy" if await booking_api.health_check() else "unhealthy"
    notification_status = "healthy" if await notification_service.health_check() else "unhealthy"

    overall = "operational" if all(
        s == "healthy" for s in [booking_status, redis_status, notification_status]
    ) else "degraded"

    return HealthResponse(
        status=overall,
        booking_api=booking_status,
        redis=redis_status,
        notification_service=notification_status,
        timestamp=datetime.now(timezone.utc),
    )


# =============================================================================
# BOOKING ENDPOINTS
# =============================================================================

@app.get(
    "/api/bookings",
    response_model=BookingListResponse,
    tags=["Bookings"],
    summary="List Bookings",
)
async def list_bookings(
    filters: BookingFilters = Depends(list_filters),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    booking_api: BaseBookingAPI = Depends(get_booking_api),
) -> BookingListResponse:
    """Filtered, sorted page of bookings plus facet counts for the filter options."""
    bookings = await fetch_for_dates(booking_api, start_date, end_date)

    filtered = apply_filters(bookings, filters)
    facets = compute_facet_counts(bookings)

    return BookingListResponse(
        total=len(filtered),
        skip=skip,
        limit=limit,
        bookings=paginate(filtered, skip, limit),
        facets=FacetCountsResponse.model_validate(facets),
    )


@app.post(
    "/api/bookings/export",
    response_model=ExportResponse,
    status_code=202,
    tags=["Bookings"],
    summary="Queue Spreadsheet Export",
)
async def export_bookings(
    filters: BookingFilters = Depends(list_filters),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    booking_api: BaseBookingAPI = Depends(get_booking_api),
) -> ExportResponse:
    """Export the bookings matching the current filters to the workbook."""
    bookings = apply_filters(
        await fetch_for_dates(booking_api, start_date, end_date),
        filters,
    )
    rows = [booking_export_row(b) for b in bookings]

    if not rows:
        return ExportResponse(success=False, message="No bookings match the export criteria", count=0)

    task = export_bookings_to_excel.delay(rows)
    logger.info(f"Queued export of {len(rows)} bookings (task {task.id})")

    return ExportResponse(
        success=True,
        message=f"Export of {len(rows)} bookings queued",
        count=len(rows),
        task_id=task.id,
    )


@app.get(
    "/api/bookings/{booking_id}",
    response_model=Booking,
    tags=["Bookings"],
    summary="Get Booking",
)
async def get_booking(
    booking_id: str,
    booking_api: BaseBookingAPI = Depends(get_booking_api),
) -> Booking:
    return await load_booking(booking_api, booking_id)


@app.get(
    "/api/bookings/{booking_id}/payment-summary",
    response_model=PaymentSummaryResponse,
    tags=["Bookings"],
    summary="Payment Summary",
)
async def get_payment_summary(
    booking_id: str,
    booking_api: BaseBookingAPI = Depends(get_booking_api),
) -> PaymentSummaryResponse:
    booking = await load_booking(booking_api, booking_id)
    summary = calculate_payment_summary(booking)
    return PaymentSummaryResponse(
        booking_id=booking.id,
        booking_reference=booking.booking_reference,
        **summary.to_dict(),
    )


@app.patch(
    "/api/bookings/{booking_id}/status",
    response_model=BookingChangeResponse,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    tags=["Bookings"],
    summary="Change Booking Status",
)
async def update_status(
    booking_id: str,
    request: StatusUpdateRequest,
    background_tasks: BackgroundTasks,
    booking_api: BaseBookingAPI = Depends(get_booking_api),
    controller: StatusTransitionController = Depends(get_controller),
    notification_service: BaseNotificationService = Depends(get_notification_service),
) -> BookingChangeResponse:
    """
    Move a booking to a new status.

    Cancelling requires a cancellation reason. The customer is notified after
    the change is accepted; a failed notification does not affect the change.
    """
    booking = await load_booking(booking_api, booking_id)

    result = await controller.request_status_change(
        booking,
        request.status,
        notes=request.admin_notes,
        cancellation_reason=request.cancellation_reason,
    )

    if settings.notify_on_status_change and result.booking is not None:
        background_tasks.add_task(dispatch_status_notification, notification_service, result.booking)

    return BookingChangeResponse(
        success=result.success,
        message=result.message,
        booking=result.booking,
    )


@app.patch(
    "/api/bookings/{booking_id}/payment",
    response_model=BookingChangeResponse,
    responses={422: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    tags=["Bookings"],
    summary="Update Payment",
)
async def update_payment(
    booking_id: str,
    request: PaymentUpdateRequest,
    booking_api: BaseBookingAPI = Depends(get_booking_api),
    controller: StatusTransitionController = Depends(get_controller),
) -> BookingChangeResponse:
    """Record the payment status and amount received for a booking."""
    booking = await load_booking(booking_api, booking_id)

    result = await controller.request_payment_change(
        booking,
        request.payment_status,
        request.deposit_amount,
    )

    return BookingChangeResponse(
        success=result.success,
        message=result.message,
        booking=result.booking,
    )


@app.post(
    "/api/bookings/{booking_id}/confirmation",
    response_model=NotificationResponse,
    tags=["Bookings"],
    summary="Resend Booking Confirmation",
)
async def resend_confirmation(
    booking_id: str,
    booking_api: BaseBookingAPI = Depends(get_booking_api),
    notification_service: BaseNotificationService = Depends(get_notification_service),
) -> NotificationResponse:
    """
    Send the booking confirmation (SMS and email) to the customer again.

    The booking service sends it once when a booking is placed; staff use
    this when the customer did not receive it or changed their contact details.
    """
    booking = await load_booking(booking_api, booking_id)

    result = await notification_service.send_booking_confirmation(booking)
    if not result.success:
        logger.warning(
            f"Confirmation for {booking.booking_reference} not delivered: {result.error_message}"
        )

    return NotificationResponse(
        success=result.success,
        provider=result.provider,
        message_id=result.message_id,
        error_message=result.error_message,
    )


# =============================================================================
# PRINT ENDPOINTS
# =============================================================================

@app.get(
    "/api/bookings/{booking_id}/receipt",
    response_class=PlainTextResponse,
    tags=["Print"],
    summary="Customer Receipt",
)
async def get_receipt(
    booking_id: str,
    booking_api: BaseBookingAPI = Depends(get_booking_api),
) -> str:
    booking = await load_booking(booking_api, booking_id)
    return render_receipt(booking)


@app.get(
    "/api/bookings/{booking_id}/docket",
    response_class=PlainTextResponse,
    tags=["Print"],
    summary="Kitchen Docket",
)
async def get_docket(
    booking_id: str,
    booking_api: BaseBookingAPI = Depends(get_booking_api),
) -> str:
    booking = await load_booking(booking_api, booking_id)
    return render_kitchen_docket(booking)


# =============================================================================
# DAY & CALENDAR ENDPOINTS
# =============================================================================

@app.get(
    "/api/days/{day}",
    response_model=DayDetailResponse,
    tags=["Calendar"],
    summary="Day Detail",
)
async def get_day(
    day: date,
    booking_api: BaseBookingAPI = Depends(get_booking_api),
) -> DayDetailResponse:
    """Summary, kitchen rollup and bookings for one local calendar day."""
    tz = business_tz()
    start, end = day_bounds(day, tz)
    bookings = [
        b for b in await fetch_range(booking_api, start, end)
        if booking_day(b, tz) == day
    ]

    return DayDetailResponse(
        day=day,
        summary=DaySummaryResponse.model_validate(build_day_summary(bookings, day)),
        kitchen_items=[
            KitchenItemResponse.model_validate(item)
            for item in aggregate_kitchen_items(bookings)
        ],
        bookings=sort_bookings(bookings, "deliveryDate", "asc"),
    )


@app.get(
    "/api/calendar/{year}/{month}",
    response_model=CalendarResponse,
    tags=["Calendar"],
    summary="Month Calendar",
)
async def get_calendar(
    year: int = Path(..., ge=2000, le=2100),
    month: int = Path(..., ge=1, le=12),
    booking_api: BaseBookingAPI = Depends(get_booking_api),
) -> CalendarResponse:
    """Per-day booking counts and totals for a month."""
    tz = business_tz()
    start, end = month_bounds(year, month, tz)
    grouped = group_bookings_by_day(await fetch_range(booking_api, start, end), tz)

    days = [
        CalendarDayResponse(
            day=day,
            booking_count=len(day_bookings),
            summary=DaySummaryResponse.model_validate(build_day_summary(day_bookings, day)),
        )
        for day, day_bookings in grouped.items()
        if day.year == year and day.month == month
    ]
    return CalendarResponse(year=year, month=month, days=days)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    """Rejected or failed booking changes."""
    if exc.http_status >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.code} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "catering.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )

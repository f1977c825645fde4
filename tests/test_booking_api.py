import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from catering.models import BookingStatus, PaymentStatus
from catering.services.booking_api import (
    HttpBookingAPI,
    InMemoryBookingAPI,
    get_booking_api,
    reset_booking_api,
    sample_bookings,
)
from tests.factories import make_booking


def raw_booking(**overrides):
    data = {
        "_id": "65f0c1a2b3c4d5e6f7a8b9c0",
        "bookingReference": "MC25030001",
        "status": "pending",
        "paymentStatus": "pending",
        "pricing": {"basePrice": 150, "addonsPrice": 0, "total": 150},
        "depositAmount": None,
        "peopleCount": 12,
        "deliveryType": "Pickup",
        "deliveryDate": "2025-03-14T07:30:00.000Z",
        "customerDetails": {"name": "Priya Sharma", "email": "priya@example.com", "phone": "0412 345 678"},
        "selectedItems": [{"name": "Butter Chicken", "quantity": 2}],
    }
    data.update(overrides)
    return data


def envelope(data=None, message="OK", success=True):
    return {"success": success, "message": message, "data": data}


class TestInMemoryBookingAPI:

    @pytest.mark.asyncio
    async def test_sample_data_covers_every_status(self):
        api = InMemoryBookingAPI(sample_bookings(), min_latency=0, max_latency=0)

        result = await api.fetch_bookings()

        assert result.success
        assert {b.status for b in result.bookings} == set(BookingStatus)

    @pytest.mark.asyncio
    async def test_fetch_filters_by_delivery_range(self):
        now = datetime(2025, 3, 14, tzinfo=timezone.utc)
        inside = make_booking(delivery_date=now + timedelta(hours=2))
        outside = make_booking(delivery_date=now + timedelta(days=3))
        api = InMemoryBookingAPI([inside, outside], min_latency=0, max_latency=0)

        result = await api.fetch_bookings(now, now + timedelta(days=1))

        assert [b.id for b in result.bookings] == [inside.id]

    @pytest.mark.asyncio
    async def test_status_update_is_stored(self):
        booking = make_booking(status="confirmed")
        api = InMemoryBookingAPI([booking], min_latency=0, max_latency=0)

        result = await api.update_booking_status(
            booking.id, BookingStatus.CANCELLED, cancellation_reason="Rain"
        )
        stored = await api.get_booking(booking.id)

        assert result.success
        assert result.message == "Booking status updated successfully"
        assert stored.booking.status == BookingStatus.CANCELLED
        assert stored.booking.cancellation_reason == "Rain"

    @pytest.mark.asyncio
    async def test_payment_update_is_stored(self):
        booking = make_booking(total=200.0)
        api = InMemoryBookingAPI([booking], min_latency=0, max_latency=0)

        await api.update_booking_payment(booking.id, PaymentStatus.DEPOSIT_PAID, 60.0)
        stored = (await api.get_booking(booking.id)).booking

        assert stored.payment_status == PaymentStatus.DEPOSIT_PAID
        assert stored.deposit_amount == 60.0

    @pytest.mark.asyncio
    async def test_unknown_booking_is_404(self):
        api = InMemoryBookingAPI(min_latency=0, max_latency=0)

        result = await api.get_booking("missing")

        assert not result.success
        assert result.status_code == 404

    @pytest.mark.asyncio
    async def test_simulated_failure(self):
        booking = make_booking()
        api = InMemoryBookingAPI([booking], failure_rate=1.0, min_latency=0, max_latency=0)

        result = await api.update_booking_status(booking.id, BookingStatus.CONFIRMED)

        assert not result.success
        assert result.status_code == 500
        assert (await api.fetch_bookings()).success is False


class TestHttpBookingAPI:

    def make_api(self, handler):
        return HttpBookingAPI(
            base_url="http://bookings.test",
            token="secret",
            transport=httpx.MockTransport(handler),
        )

    @pytest.mark.asyncio
    async def test_fetch_sends_range_and_auth(self):
        seen = {}

        def handler(request):
            seen["request"] = request
            return httpx.Response(200, json=envelope({"bookings": [raw_booking()]}))

        api = self.make_api(handler)
        start = datetime(2025, 3, 13, 13, tzinfo=timezone.utc)
        end = datetime(2025, 3, 14, 13, tzinfo=timezone.utc)

        result = await api.fetch_bookings(start, end)

        request = seen["request"]
        assert request.url.path == "/api/bookings"
        assert request.url.params["startDate"] == start.isoformat()
        assert request.url.params["endDate"] == end.isoformat()
        assert request.headers["Authorization"] == "Bearer secret"
        assert result.success
        booking = result.bookings[0]
        assert booking.id == "65f0c1a2b3c4d5e6f7a8b9c0"
        assert booking.deposit_amount == 0.0
        assert booking.pricing.total == 150

    @pytest.mark.asyncio
    async def test_unreadable_booking_is_skipped_not_fatal(self):
        good = raw_booking()
        fractional = raw_booking(
            _id="b-frac", bookingReference="MC25030002",
            selectedItems=[{"name": "Rice", "quantity": 1.5}],
        )
        broken = raw_booking(_id="b-bad", bookingReference="MC25030003", status="archived")

        def handler(request):
            return httpx.Response(200, json=envelope({"bookings": [good, broken, fractional]}))

        result = await self.make_api(handler).fetch_bookings()

        assert result.success
        assert [b.booking_reference for b in result.bookings] == ["MC25030001", "MC25030002"]
        assert result.bookings[1].selected_items[0].quantity == 1.5

    @pytest.mark.asyncio
    async def test_status_patch_payload(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            updated = raw_booking(status="cancelled", cancellationReason="Rain")
            return httpx.Response(200, json=envelope({"booking": updated}, "Booking status updated successfully"))

        api = self.make_api(handler)

        result = await api.update_booking_status(
            "abc", BookingStatus.CANCELLED, notes="Called", cancellation_reason="Rain"
        )

        assert seen["method"] == "PATCH"
        assert seen["path"] == "/api/bookings/abc/status"
        assert seen["body"] == {"status": "cancelled", "adminNotes": "Called", "cancellationReason": "Rain"}
        assert result.success
        assert result.message == "Booking status updated successfully"
        assert result.booking.status == BookingStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_payment_patch_payload(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=envelope({"booking": raw_booking(depositAmount=45)}))

        api = self.make_api(handler)

        result = await api.update_booking_payment("abc", PaymentStatus.DEPOSIT_PAID, 45.0)

        assert seen["path"] == "/api/bookings/abc/payment"
        assert seen["body"] == {"paymentStatus": "deposit_paid", "depositAmount": 45.0}
        assert result.booking.deposit_amount == 45

    @pytest.mark.asyncio
    async def test_validation_error_uses_service_message(self):
        def handler(request):
            return httpx.Response(400, json={"success": False, "message": "Invalid status"})

        result = await self.make_api(handler).update_booking_status("abc", BookingStatus.READY)

        assert not result.success
        assert result.error_message == "Invalid status"
        assert result.status_code == 400

    @pytest.mark.asyncio
    async def test_errors_list_is_used_when_no_message(self):
        def handler(request):
            return httpx.Response(422, json={"errors": ["depositAmount must be positive"]})

        result = await self.make_api(handler).update_booking_payment("abc", PaymentStatus.PENDING, 0)

        assert result.error_message == "depositAmount must be positive"

    @pytest.mark.asyncio
    async def test_not_found(self):
        def handler(request):
            return httpx.Response(404, json={"success": False, "message": "Booking not found"})

        result = await self.make_api(handler).get_booking("nope")

        assert result.status_code == 404
        assert result.error_message == "Booking not found"

    @pytest.mark.asyncio
    async def test_transport_error_is_a_failed_result(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        api = self.make_api(handler)

        result = await api.fetch_bookings()

        assert not result.success
        assert "unreachable" in result.error_message
        assert await api.health_check() is False

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        def handler(request):
            return httpx.Response(200, text="<html>gateway</html>")

        result = await self.make_api(handler).get_booking("abc")

        assert not result.success
        assert result.error_message == "Invalid response from booking service"

    @pytest.mark.asyncio
    async def test_success_false_envelope(self):
        def handler(request):
            return httpx.Response(200, json=envelope(None, "Nothing to update", success=False))

        result = await self.make_api(handler).update_booking_status("abc", BookingStatus.READY)

        assert not result.success
        assert result.error_message == "Nothing to update"


class TestFactory:

    def test_development_uses_in_memory_store(self):
        reset_booking_api()

        api = get_booking_api()

        assert api.provider_name == "memory"
        assert get_booking_api() is api

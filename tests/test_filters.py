from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from catering.services.filters import (
    ALL,
    BookingFilters,
    apply_filters,
    compute_facet_counts,
    filter_bookings,
    paginate,
    resolve_field,
    sort_bookings,
)
from tests.factories import make_booking


@pytest.fixture
def ten_bookings():
    statuses = ["confirmed"] * 3 + ["pending"] * 4 + ["ready"] * 2 + ["cancelled"]
    return [make_booking(status=status) for status in statuses]


class TestBookingFilters:

    def test_defaults(self):
        filters = BookingFilters()

        assert filters.status == ALL
        assert filters.sort_by == "deliveryDate"
        assert filters.sort_order == "asc"

    def test_blank_and_none_mean_all(self):
        filters = BookingFilters(status="", delivery_type=None, search=None)

        assert filters.status == ALL
        assert filters.delivery_type == ALL
        assert filters.search == ""

    def test_rejects_unknown_sort_order(self):
        with pytest.raises(ValidationError):
            BookingFilters(sort_order="sideways")

    def test_is_immutable(self):
        with pytest.raises(ValidationError):
            BookingFilters().status = "pending"


class TestFiltering:

    def test_status_filter_and_facets(self, ten_bookings):
        filtered = filter_bookings(ten_bookings, BookingFilters(status="confirmed"))
        facets = compute_facet_counts(ten_bookings)

        assert len(filtered) == 3
        assert facets.status["pending"] == 4
        assert facets.status[ALL] == 10
        assert facets.status["completed"] == 0

    def test_facets_ignore_active_filters(self, ten_bookings):
        filtered = filter_bookings(ten_bookings, BookingFilters(status="ready"))

        assert compute_facet_counts(ten_bookings).status["confirmed"] == 3
        assert len(filtered) == 2

    def test_delivery_and_source_type(self):
        pickup = make_booking(delivery_type="Pickup")
        custom = make_booking(
            delivery_type="Delivery",
            order_source={"source_type": "customOrder", "source_name": "Custom Order"},
        )
        untyped = make_booking(delivery_type=None)
        bookings = [pickup, custom, untyped]

        assert filter_bookings(bookings, BookingFilters(delivery_type="Delivery")) == [custom]
        assert filter_bookings(bookings, BookingFilters(source_type="customOrder")) == [custom]
        assert filter_bookings(bookings, BookingFilters(source_type="menu")) == [pickup, untyped]

        facets = compute_facet_counts(bookings)
        assert facets.delivery_type == {ALL: 3, "Pickup": 1, "Delivery": 1, "Event": 0}
        assert facets.source_type == {ALL: 3, "menu": 2, "customOrder": 1}

    def test_search_is_case_insensitive_across_fields(self):
        priya = make_booking(customer_details={"name": "Priya Sharma", "email": "p@example.com"})
        tom = make_booking(customer_details={"name": "Tom", "phone": "0499 111 222"})
        canberra = make_booking(order_source={"location_name": "Canberra - Mawson"})

        assert filter_bookings([priya, tom, canberra], BookingFilters(search="  PRIYA ")) == [priya]
        assert filter_bookings([priya, tom, canberra], BookingFilters(search="0499")) == [tom]
        assert filter_bookings([priya, tom, canberra], BookingFilters(search="mawson")) == [canberra]

    def test_search_by_reference(self):
        booking = make_booking(booking_reference="ZX-7781")

        assert filter_bookings([booking, make_booking()], BookingFilters(search="zx-77")) == [booking]

    def test_unknown_filter_value_matches_nothing(self, ten_bookings):
        assert filter_bookings(ten_bookings, BookingFilters(status="archived")) == []


class TestSorting:

    def test_sorts_by_nested_field(self):
        bookings = [make_booking(total=t) for t in (300.0, 100.0, 200.0)]

        asc = sort_bookings(bookings, "pricing.total", "asc")
        desc = sort_bookings(bookings, "pricing.total", "desc")

        assert [b.pricing.total for b in asc] == [100.0, 200.0, 300.0]
        assert [b.pricing.total for b in desc] == [300.0, 200.0, 100.0]

    def test_stable_for_equal_keys(self):
        bookings = [make_booking(total=50.0) for _ in range(4)]

        assert sort_bookings(bookings, "pricing.total", "asc") == bookings
        assert sort_bookings(bookings, "pricing.total", "desc") == bookings

    def test_missing_values_go_last_in_both_directions(self):
        dated = [
            make_booking(delivery_date=datetime(2025, 3, day, tzinfo=timezone.utc))
            for day in (12, 10, 11)
        ]
        undated = make_booking(delivery_date=None)
        bookings = dated[:2] + [undated] + dated[2:]

        asc = sort_bookings(bookings, "deliveryDate", "asc")
        desc = sort_bookings(bookings, "deliveryDate", "desc")

        assert asc[-1] is undated
        assert desc[-1] is undated
        assert [b.delivery_date.day for b in asc[:3]] == [10, 11, 12]
        assert [b.delivery_date.day for b in desc[:3]] == [12, 11, 10]

    def test_string_fields(self):
        bookings = [
            make_booking(customer_details={"name": name})
            for name in ("Charlie", "alice", "Bob")
        ]

        names = [b.customer_details.name for b in sort_bookings(bookings, "customerDetails.name")]

        assert names == ["Bob", "Charlie", "alice"]

    def test_unknown_field_keeps_input_order(self):
        bookings = [make_booking() for _ in range(3)]

        assert sort_bookings(bookings, "doesNotExist", "desc") == bookings

    def test_resolve_field_accepts_both_namings(self):
        booking = make_booking(total=42.0)

        assert resolve_field(booking, "pricing.total") == 42.0
        assert resolve_field(booking, "customerDetails.name") == booking.customer_details.name
        assert resolve_field(booking, "customer_details.name") == booking.customer_details.name
        assert resolve_field(booking, "address.street") is None


class TestApplyFilters:

    def test_filters_then_sorts_without_touching_input(self, ten_bookings):
        original = list(ten_bookings)
        filters = BookingFilters(status="pending", sort_by="bookingReference", sort_order="desc")

        result = apply_filters(ten_bookings, filters)

        assert len(result) == 4
        refs = [b.booking_reference for b in result]
        assert refs == sorted(refs, reverse=True)
        assert ten_bookings == original

    def test_is_idempotent(self, ten_bookings):
        filters = BookingFilters(status="confirmed")

        once = apply_filters(ten_bookings, filters)

        assert apply_filters(once, filters) == once

    def test_paginate(self):
        bookings = [make_booking() for _ in range(5)]

        assert paginate(bookings, 0, 2) == bookings[:2]
        assert paginate(bookings, 4, 10) == bookings[4:]
        assert paginate(bookings, 10, 10) == []

from catering.models import BookingStatus
from catering.services.kitchen import aggregate_kitchen_items, kitchen_items_for_booking
from tests.factories import make_booking, make_item


class TestAggregateKitchenItems:

    def test_sums_quantities_and_takes_most_urgent_status(self):
        first = make_booking(
            status="confirmed",
            people_count=20,
            selected_items=[make_item("Butter Chicken", quantity=2)],
        )
        second = make_booking(
            status="preparing",
            people_count=30,
            selected_items=[make_item("Butter Chicken", quantity=3)],
        )

        items = aggregate_kitchen_items([first, second])

        assert len(items) == 1
        item = items[0]
        assert item.name == "Butter Chicken"
        assert item.total_quantity == 5
        assert item.total_people == 50
        assert item.booking_count == 2
        assert item.highest_priority_status == BookingStatus.PREPARING
        assert [ref.booking_id for ref in item.bookings] == [first.id, second.id]

    def test_cancelled_bookings_contribute_nothing(self):
        cancelled = make_booking(
            status="cancelled",
            selected_items=[make_item("Samosa", quantity=10)],
        )
        active = make_booking(
            status="pending",
            selected_items=[make_item("Samosa", quantity=1)],
        )

        items = aggregate_kitchen_items([cancelled, active])

        assert items[0].total_quantity == 1
        assert items[0].booking_count == 1

    def test_only_cancelled_gives_empty_rollup(self):
        cancelled = make_booking(status="cancelled", selected_items=[make_item()])

        assert aggregate_kitchen_items([cancelled]) == []

    def test_missing_quantity_counts_as_one(self):
        booking = make_booking(selected_items=[make_item("Garlic Naan")])

        assert aggregate_kitchen_items([booking])[0].total_quantity == 1

    def test_names_match_case_and_whitespace_insensitively(self):
        a = make_booking(selected_items=[make_item("Mango Lassi", quantity=2)])
        b = make_booking(selected_items=[make_item("  mango lassi ", quantity=4)])

        items = aggregate_kitchen_items([a, b])

        assert len(items) == 1
        assert items[0].name == "Mango Lassi"
        assert items[0].total_quantity == 6

    def test_items_without_names_are_skipped(self):
        booking = make_booking(selected_items=[make_item(""), make_item("   "), make_item("Dal")])

        items = aggregate_kitchen_items([booking])

        assert [item.name for item in items] == ["Dal"]

    def test_orders_by_urgency_then_quantity(self):
        pending = make_booking(status="pending", selected_items=[make_item("Rice", quantity=50)])
        ready = make_booking(status="ready", selected_items=[make_item("Curry", quantity=1)])
        preparing = make_booking(
            status="preparing",
            selected_items=[make_item("Naan", quantity=2), make_item("Raita", quantity=9)],
        )

        names = [item.name for item in aggregate_kitchen_items([pending, ready, preparing])]

        assert names == ["Raita", "Naan", "Curry", "Rice"]

    def test_first_seen_metadata_wins_and_conflict_is_flagged(self):
        a = make_booking(selected_items=[make_item("Korma", is_vegetarian=True)])
        b = make_booking(selected_items=[make_item("Korma", is_vegetarian=False, allergens=["nuts"])])

        item = aggregate_kitchen_items([a, b])[0]

        assert item.is_vegetarian is True
        assert item.allergens == []
        assert item.has_metadata_conflict is True

    def test_matching_metadata_has_no_conflict(self):
        a = make_booking(selected_items=[make_item("Korma", allergens=["nuts", "dairy"])])
        b = make_booking(selected_items=[make_item("korma", allergens=["dairy", "nuts"])])

        assert aggregate_kitchen_items([a, b])[0].has_metadata_conflict is False

    def test_is_idempotent_and_leaves_input_alone(self):
        bookings = [
            make_booking(status="confirmed", selected_items=[make_item("Dal", quantity=2)]),
            make_booking(status="ready", selected_items=[make_item("Dal", quantity=1)]),
        ]
        snapshot = [b.model_dump() for b in bookings]

        first = aggregate_kitchen_items(bookings)
        second = aggregate_kitchen_items(bookings)

        assert first == second
        assert [b.model_dump() for b in bookings] == snapshot

    def test_malformed_item_entries_are_ignored(self):
        booking = make_booking(selected_items=["oops", None, make_item("Dal")])

        assert [item.name for item in aggregate_kitchen_items([booking])] == ["Dal"]

    def test_unreadable_quantity_counts_as_one(self):
        booking = make_booking(selected_items=[
            make_item("Butter Chicken", quantity="two"),
            make_item("Butter Chicken", quantity={"value": 3}),
        ])

        assert aggregate_kitchen_items([booking])[0].total_quantity == 2

    def test_fractional_quantities_are_summed(self):
        a = make_booking(selected_items=[make_item("Rice", quantity=1.5)])
        b = make_booking(selected_items=[make_item("Rice", quantity="2")])

        assert aggregate_kitchen_items([a, b])[0].total_quantity == 3.5

    def test_non_text_name_skips_only_that_item(self):
        booking = make_booking(selected_items=[make_item(123), make_item("Naan", allergens="gluten")])

        items = aggregate_kitchen_items([booking])

        assert [item.name for item in items] == ["Naan"]
        assert items[0].allergens == ["gluten"]


class TestKitchenItemsForBooking:

    def test_lines_keep_booking_order_and_label_quantities(self):
        booking = make_booking(selected_items=[
            make_item("Butter Chicken"),
            make_item("Mango Lassi", category="addons", type="addon", quantity=8),
            make_item("Gulab Jamun", category="addons", type="addon", quantity=1),
        ])

        lines = kitchen_items_for_booking(booking)

        assert [line.name for line in lines] == ["Butter Chicken", "Mango Lassi", "Gulab Jamun"]
        assert [line.quantity_label for line in lines] == ["per person", "8x", "per person"]

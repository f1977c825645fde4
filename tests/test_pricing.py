import pytest

from catering.services.pricing import calculate_payment_summary
from tests.factories import make_booking


class TestPaymentSummary:

    def test_balance_is_total_minus_paid(self):
        booking = make_booking(total=150.0, deposit_amount=45.0)

        summary = calculate_payment_summary(booking)

        assert summary.total == 150.0
        assert summary.paid == 45.0
        assert summary.balance == 105.0
        assert summary.percent_paid == pytest.approx(30.0)
        assert summary.is_overpaid is False

    def test_nothing_paid(self):
        summary = calculate_payment_summary(make_booking(total=80.0))

        assert summary.balance == 80.0
        assert summary.percent_paid == 0.0

    def test_zero_total_has_zero_percent(self):
        summary = calculate_payment_summary(make_booking(total=0.0, deposit_amount=0.0))

        assert summary.percent_paid == 0.0
        assert summary.balance == 0.0

    def test_overpayment_keeps_negative_balance_and_clamps_percent(self):
        summary = calculate_payment_summary(make_booking(total=100.0, deposit_amount=120.0))

        assert summary.balance == -20.0
        assert summary.percent_paid == 100.0
        assert summary.is_overpaid is True

    def test_missing_pricing_defaults_to_zero(self):
        booking = make_booking(pricing=None, deposit_amount=None)

        summary = calculate_payment_summary(booking)

        assert summary.total == 0.0
        assert summary.paid == 0.0
        assert summary.balance == 0.0

    def test_rounds_to_cents(self):
        summary = calculate_payment_summary(make_booking(total=100.0, deposit_amount=33.333))

        assert summary.paid == 33.33
        assert summary.balance == 66.67
        assert summary.percent_paid == 33.33

    def test_to_dict(self):
        data = calculate_payment_summary(make_booking(total=10.0)).to_dict()

        assert set(data) == {"total", "paid", "balance", "percent_paid", "is_overpaid"}

"""
Pricing & Balance Calculator

Derives what has been paid and what is still owed on a booking.
"""

from dataclasses import dataclass, asdict

from catering.models import Booking


@dataclass(frozen=True)
class PaymentSummary:
    """
    Money view of one booking.

    Attributes:
        total: Booking total (pricing.total)
        paid: Amount received so far (deposit_amount)
        balance: total - paid, negative when overpaid
        percent_paid: paid as a percentage of total, clamped to 0..100
        is_overpaid: True when more than the total has been received
    """
    total: float
    paid: float
    balance: float
    percent_paid: float
    is_overpaid: bool

    def to_dict(self) -> dict:
        return asdict(self)


def calculate_payment_summary(booking: Booking) -> PaymentSummary:
    """Calculate total, paid, balance and percent paid for a booking."""
    total = booking.pricing.total or 0.0
    paid = booking.deposit_amount or 0.0

    if total > 0:
        percent_paid = min(max(paid / total * 100, 0.0), 100.0)
    else:
        percent_paid = 0.0

    return PaymentSummary(
        total=round(total, 2),
        paid=round(paid, 2),
        balance=round(total - paid, 2),
        percent_paid=round(percent_paid, 2),
        is_overpaid=paid > total,
    )

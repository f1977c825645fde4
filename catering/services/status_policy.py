"""
Booking Status Policy

Kitchen urgency ranking and the allowed booking lifecycle.

Urgency (lower number = more urgent):
    preparing(1) < ready(2) < confirmed(3) < pending(4) < completed(5) < cancelled(6)

Lifecycle:
    pending   -> confirmed, cancelled
    confirmed -> preparing, completed, cancelled
    preparing -> ready, cancelled
    ready     -> completed, cancelled
    completed, cancelled: terminal
"""

from typing import Union

from catering.models import BookingStatus

StatusLike = Union[BookingStatus, str]

STATUS_PRIORITY: dict[BookingStatus, int] = {
    BookingStatus.PREPARING: 1,
    BookingStatus.READY: 2,
    BookingStatus.CONFIRMED: 3,
    BookingStatus.PENDING: 4,
    BookingStatus.COMPLETED: 5,
    BookingStatus.CANCELLED: 6,
}

# Unknown statuses rank behind every known one
UNKNOWN_PRIORITY = max(STATUS_PRIORITY.values()) + 1

ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({
        BookingStatus.CONFIRMED,
        BookingStatus.CANCELLED,
    }),
    BookingStatus.CONFIRMED: frozenset({
        BookingStatus.PREPARING,
        BookingStatus.COMPLETED,
        BookingStatus.CANCELLED,
    }),
    BookingStatus.PREPARING: frozenset({
        BookingStatus.READY,
        BookingStatus.CANCELLED,
    }),
    BookingStatus.READY: frozenset({
        BookingStatus.COMPLETED,
        BookingStatus.CANCELLED,
    }),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}


def _coerce(status: StatusLike) -> BookingStatus:
    return status if isinstance(status, BookingStatus) else BookingStatus(status)


def priority_of(status: StatusLike) -> int:
    """Return the kitchen urgency rank of a status."""
    try:
        return STATUS_PRIORITY[_coerce(status)]
    except ValueError:
        return UNKNOWN_PRIORITY


def more_urgent(a: StatusLike, b: StatusLike) -> bool:
    """True if ``a`` needs kitchen attention before ``b``."""
    return priority_of(a) < priority_of(b)


def allowed_next_statuses(current: StatusLike) -> frozenset[BookingStatus]:
    try:
        return ALLOWED_TRANSITIONS[_coerce(current)]
    except ValueError:
        return frozenset()


def can_transition(current: StatusLike, target: StatusLike) -> bool:
    """Check a status change against the lifecycle table."""
    try:
        target = _coerce(target)
    except ValueError:
        return False
    return target in allowed_next_statuses(current)


def is_terminal(status: StatusLike) -> bool:
    return not allowed_next_statuses(status)

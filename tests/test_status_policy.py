import pytest

from catering.models import BookingStatus
from catering.services.status_policy import (
    ALLOWED_TRANSITIONS,
    UNKNOWN_PRIORITY,
    allowed_next_statuses,
    can_transition,
    is_terminal,
    more_urgent,
    priority_of,
)


class TestPriority:

    def test_kitchen_urgency_order(self):
        ordered = sorted(BookingStatus, key=priority_of)

        assert ordered == [
            BookingStatus.PREPARING,
            BookingStatus.READY,
            BookingStatus.CONFIRMED,
            BookingStatus.PENDING,
            BookingStatus.COMPLETED,
            BookingStatus.CANCELLED,
        ]

    def test_accepts_plain_strings(self):
        assert priority_of("preparing") == 1
        assert more_urgent("ready", "pending")
        assert not more_urgent("cancelled", "completed")

    def test_unknown_status_ranks_last(self):
        assert priority_of("archived") == UNKNOWN_PRIORITY
        assert more_urgent("cancelled", "archived")


class TestTransitions:

    @pytest.mark.parametrize("current,target", [
        ("pending", "confirmed"),
        ("pending", "cancelled"),
        ("confirmed", "preparing"),
        ("confirmed", "completed"),
        ("preparing", "ready"),
        ("ready", "completed"),
        ("ready", "cancelled"),
    ])
    def test_allowed(self, current, target):
        assert can_transition(current, target)

    @pytest.mark.parametrize("current,target", [
        ("pending", "completed"),
        ("pending", "preparing"),
        ("preparing", "confirmed"),
        ("completed", "cancelled"),
        ("cancelled", "pending"),
        ("confirmed", "confirmed"),
    ])
    def test_rejected(self, current, target):
        assert not can_transition(current, target)

    def test_unknown_statuses_cannot_transition(self):
        assert not can_transition("pending", "archived")
        assert not can_transition("archived", "pending")
        assert allowed_next_statuses("archived") == frozenset()

    def test_terminal_statuses(self):
        assert is_terminal(BookingStatus.COMPLETED)
        assert is_terminal(BookingStatus.CANCELLED)
        assert not is_terminal(BookingStatus.READY)

    def test_every_status_has_an_entry(self):
        assert set(ALLOWED_TRANSITIONS) == set(BookingStatus)

    def test_no_self_transitions(self):
        for status, targets in ALLOWED_TRANSITIONS.items():
            assert status not in targets

"""Tests for the booking status lifecycle."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from caarvo.core.exceptions import InvalidTransitionException
from caarvo.domain.lifecycle import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATUSES,
    BookingStatus,
    can_transition,
    check_transition,
    transition,
)
from caarvo.domain.models.booking import Booking


def _booking(status: str) -> SimpleNamespace:
    return SimpleNamespace(
        status=status,
        completed_at=None,
        cancelled_at=None,
        cancelled_by=None,
        cancellation_reason=None,
    )


class TestTransitionTable:
    @pytest.mark.parametrize(
        "current, target",
        [
            ("pending", "assigned"),
            ("assigned", "en-route"),
            ("en-route", "in-progress"),
            ("in-progress", "completed"),
            ("pending", "cancelled"),
            ("in-progress", "cancelled"),
        ],
    )
    def test_forward_moves_allowed(self, current, target):
        assert can_transition(current, target)

    @pytest.mark.parametrize(
        "current, target",
        [
            ("assigned", "pending"),
            ("en-route", "assigned"),
            ("pending", "in-progress"),
            ("assigned", "completed"),
            ("pending", "completed"),
        ],
    )
    def test_skips_and_reversals_rejected(self, current, target):
        assert not can_transition(current, target)

    def test_terminal_statuses_have_no_exits(self):
        for status in TERMINAL_STATUSES:
            assert ALLOWED_TRANSITIONS[status] == frozenset()
            for target in BookingStatus:
                assert not can_transition(status.value, target.value, shortcut=True)

    def test_every_status_has_an_entry(self):
        assert set(ALLOWED_TRANSITIONS) == set(BookingStatus)


class TestCompletionShortcut:
    def test_shortcut_from_pending(self):
        assert can_transition("pending", "completed", shortcut=True)

    def test_shortcut_from_assigned(self):
        assert can_transition("assigned", "completed", shortcut=True)

    def test_shortcut_does_not_open_other_targets(self):
        assert not can_transition("pending", "in-progress", shortcut=True)

    def test_shortcut_does_not_reopen_cancelled(self):
        assert not can_transition("cancelled", "completed", shortcut=True)


class TestCheckTransition:
    def test_invalid_move_raises_with_details(self):
        with pytest.raises(InvalidTransitionException) as exc_info:
            check_transition("assigned", "completed")
        assert exc_info.value.status_code == 400
        assert exc_info.value.details == {"from": "assigned", "to": "completed"}

    def test_unknown_status_raises(self):
        with pytest.raises(InvalidTransitionException):
            check_transition("pending", "teleported")


class TestTransitionStamps:
    def test_completion_stamps_completed_at(self):
        booking = _booking("in-progress")
        now = datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc)
        previous = transition(booking, "completed", now=now)
        assert previous == "in-progress"
        assert booking.status == "completed"
        assert booking.completed_at == now

    def test_cancellation_stamps_actor_and_reason(self):
        booking = _booking("pending")
        transition(booking, "cancelled", cancelled_by="customer", reason="Plans changed")
        assert booking.status == "cancelled"
        assert booking.cancelled_at is not None
        assert booking.cancelled_by == "customer"
        assert booking.cancellation_reason == "Plans changed"

    def test_rejected_move_leaves_booking_untouched(self):
        booking = _booking("completed")
        with pytest.raises(InvalidTransitionException):
            transition(booking, "cancelled", cancelled_by="admin")
        assert booking.status == "completed"
        assert booking.cancelled_at is None


class TestCancellationWindow:
    def _scheduled(self, status: str, hours_ahead: float, now: datetime) -> Booking:
        return Booking(status=status, scheduled_date=now + timedelta(hours=hours_ahead))

    def test_pending_outside_window_is_cancellable(self):
        now = datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc)
        assert self._scheduled("pending", 3, now).cancellable_at(now, window_hours=2)

    def test_pending_inside_window_is_not_cancellable(self):
        now = datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc)
        assert not self._scheduled("pending", 1, now).cancellable_at(now, window_hours=2)

    def test_exactly_at_window_is_not_cancellable(self):
        now = datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc)
        assert not self._scheduled("pending", 2, now).cancellable_at(now, window_hours=2)

    def test_assigned_is_never_cancellable(self):
        now = datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc)
        assert not self._scheduled("assigned", 48, now).cancellable_at(now, window_hours=2)

"""Booking status lifecycle.

Every status write goes through ``transition``. The table below is the only
place that decides which moves are legal; ``completed`` and ``cancelled`` are
terminal.
"""

import enum
from datetime import datetime
from typing import Optional

from caarvo.core.clock import utcnow
from caarvo.core.exceptions import InvalidTransitionException


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    EN_ROUTE = "en-route"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.ASSIGNED, BookingStatus.CANCELLED}),
    BookingStatus.ASSIGNED: frozenset({BookingStatus.EN_ROUTE, BookingStatus.CANCELLED}),
    BookingStatus.EN_ROUTE: frozenset({BookingStatus.IN_PROGRESS, BookingStatus.CANCELLED}),
    BookingStatus.IN_PROGRESS: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

# Reachable only through the explicit "complete" operation
COMPLETION_SHORTCUT_FROM = frozenset({BookingStatus.PENDING, BookingStatus.ASSIGNED})

TERMINAL_STATUSES = frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED})

# Statuses a worker may set through the generic status endpoint
WORKER_SETTABLE = frozenset({BookingStatus.EN_ROUTE, BookingStatus.IN_PROGRESS, BookingStatus.COMPLETED})


def can_transition(current: str, target: str, shortcut: bool = False) -> bool:
    current_status = BookingStatus(current)
    target_status = BookingStatus(target)
    if target_status in ALLOWED_TRANSITIONS[current_status]:
        return True
    return (
        shortcut
        and target_status == BookingStatus.COMPLETED
        and current_status in COMPLETION_SHORTCUT_FROM
    )


def check_transition(current: str, target: str, shortcut: bool = False) -> None:
    try:
        allowed = can_transition(current, target, shortcut=shortcut)
    except ValueError:
        raise InvalidTransitionException(f"Unknown booking status: {target}")
    if not allowed:
        raise InvalidTransitionException(
            f"Cannot change booking status from {current} to {target}",
            details={"from": current, "to": target},
        )


def transition(
    booking,
    target: str,
    *,
    shortcut: bool = False,
    cancelled_by: Optional[str] = None,
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    """Move ``booking`` to ``target`` and stamp the audit fields.

    Returns the previous status. The caller owns the commit.
    """
    previous = booking.status
    check_transition(previous, target, shortcut=shortcut)
    now = now or utcnow()

    booking.status = BookingStatus(target).value
    if booking.status == BookingStatus.COMPLETED.value:
        booking.completed_at = now
    elif booking.status == BookingStatus.CANCELLED.value:
        booking.cancelled_at = now
        booking.cancelled_by = cancelled_by
        if reason:
            booking.cancellation_reason = reason
    return previous

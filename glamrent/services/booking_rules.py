"""Booking status state machine and who may drive it.

Both checks are pure functions of the booking's parties, the requester and
the requested status, so they can be exercised without a database.
"""

from typing import Dict, FrozenSet
from glamrent.exceptions import Forbidden, InvalidTransition
from glamrent.schemas.booking_schema import BookingStatus

TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.pending: frozenset(
        {BookingStatus.confirmed, BookingStatus.rejected, BookingStatus.cancelled}
    ),
    BookingStatus.confirmed: frozenset({BookingStatus.completed, BookingStatus.cancelled}),
    BookingStatus.rejected: frozenset(),
    BookingStatus.cancelled: frozenset(),
    BookingStatus.completed: frozenset(),
}

TERMINAL_STATES = frozenset(state for state, targets in TRANSITIONS.items() if not targets)

OWNER_ONLY = frozenset({BookingStatus.confirmed, BookingStatus.rejected, BookingStatus.completed})

FORBIDDEN_MESSAGES = {
    BookingStatus.confirmed: "Only the owner can confirm or reject bookings",
    BookingStatus.rejected: "Only the owner can confirm or reject bookings",
    BookingStatus.completed: "Only the owner can mark bookings as completed",
    BookingStatus.cancelled: "Not authorized to cancel this booking",
    BookingStatus.pending: "Not authorized to update this booking",
}


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return BookingStatus(target) in TRANSITIONS.get(BookingStatus(current), frozenset())


def ensure_transition(current: BookingStatus, target: BookingStatus) -> None:
    if not can_transition(current, target):
        raise InvalidTransition(BookingStatus(current).value, BookingStatus(target).value)


def is_authorized(customer_id: str, owner_id: str, requester_id: str, target: BookingStatus) -> bool:
    target = BookingStatus(target)
    if target in OWNER_ONLY:
        return requester_id == owner_id
    return requester_id in (customer_id, owner_id)


def ensure_authorized(customer_id: str, owner_id: str, requester_id: str, target: BookingStatus) -> None:
    if not is_authorized(customer_id, owner_id, requester_id, target):
        raise Forbidden(FORBIDDEN_MESSAGES[BookingStatus(target)])

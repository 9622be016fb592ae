"""Booking state machine.

States: Pending → Confirmed → Cancelled, Pending → Cancelled.
Cancelled is terminal and a confirmed booking can never return to Pending.
Requesting the current status is a no-op, except on a cancelled booking.
"""

from app.domain.errors import IllegalTransition, InvalidFormat

PENDING = "Pending"
CONFIRMED = "Confirmed"
CANCELLED = "Cancelled"

BOOKING_STATUSES = (PENDING, CONFIRMED, CANCELLED)

BOOKING_TRANSITIONS: dict[str, set[str]] = {
    PENDING: {PENDING, CONFIRMED, CANCELLED},
    CONFIRMED: {CONFIRMED, CANCELLED},
    CANCELLED: set(),
}


def assert_valid_status(status: str) -> None:
    """Reject anything outside the closed status set (case-sensitive)."""
    if status not in BOOKING_STATUSES:
        raise InvalidFormat(
            "status",
            f"Invalid status. Must be one of: {', '.join(BOOKING_STATUSES)}",
        )


def assert_booking_transition(current: str, target: str) -> None:
    assert_valid_status(target)
    allowed = BOOKING_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise IllegalTransition(current, target)


def can_transition(current: str, target: str) -> bool:
    """Check a transition without raising."""
    return target in BOOKING_TRANSITIONS.get(current, set())

"""Date range overlap detection.

Ranges are inclusive on both ends, so a stay checking out on day N and another
checking in on day N share that day and conflict. Same-day turnover is
therefore rejected.
"""

from collections.abc import Iterable
from datetime import date
from typing import Protocol, TypeVar
from uuid import UUID

from app.domain.booking_state import CANCELLED


class DatedBooking(Protocol):
    id: UUID
    status: str
    check_in_date: date
    check_out_date: date


B = TypeVar("B", bound=DatedBooking)


def _within(day: date, start: date, end: date) -> bool:
    return start <= day <= end


def ranges_overlap(a: date, b: date, c: date, d: date) -> bool:
    """Return True when [a, b] and [c, d] share at least one calendar day."""
    return (
        _within(a, c, d)
        or _within(b, c, d)
        or _within(c, a, b)
        or _within(d, a, b)
    )


def find_conflicts(
    check_in: date,
    check_out: date,
    bookings: Iterable[B],
    exclude_id: UUID | None = None,
) -> list[B]:
    """Return the non-cancelled bookings whose stay overlaps the proposed one."""
    return [
        booking
        for booking in bookings
        if booking.status != CANCELLED
        and booking.id != exclude_id
        and ranges_overlap(check_in, check_out, booking.check_in_date, booking.check_out_date)
    ]

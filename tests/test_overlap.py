from datetime import date
from types import SimpleNamespace
from uuid import uuid4

import pytest

from app.domain.booking_state import CANCELLED, CONFIRMED, PENDING
from app.domain.overlap import find_conflicts, ranges_overlap

JUNE_1 = date(2025, 6, 1)
JUNE_5 = date(2025, 6, 5)


@pytest.mark.parametrize(
    ("start", "end", "expected"),
    [
        (date(2025, 5, 20), date(2025, 5, 31), False),  # ends the day before
        (date(2025, 6, 6), date(2025, 6, 10), False),  # starts the day after
        (date(2025, 6, 5), date(2025, 6, 10), True),  # shares check-out day
        (date(2025, 5, 25), date(2025, 6, 1), True),  # shares check-in day
        (date(2025, 6, 2), date(2025, 6, 3), True),  # inside
        (date(2025, 5, 25), date(2025, 6, 10), True),  # surrounds
        (JUNE_1, JUNE_5, True),  # identical
        (JUNE_5, JUNE_5, True),  # zero-night stay on the boundary
    ],
)
def test_ranges_overlap_is_inclusive(start: date, end: date, expected: bool) -> None:
    assert ranges_overlap(JUNE_1, JUNE_5, start, end) is expected
    assert ranges_overlap(start, end, JUNE_1, JUNE_5) is expected


def _booking(start: date, end: date, status: str = PENDING) -> SimpleNamespace:
    return SimpleNamespace(id=uuid4(), status=status, check_in_date=start, check_out_date=end)


def test_find_conflicts_ignores_cancelled_bookings() -> None:
    pending = _booking(JUNE_1, JUNE_5)
    confirmed = _booking(date(2025, 6, 4), date(2025, 6, 8), CONFIRMED)
    cancelled = _booking(date(2025, 6, 3), date(2025, 6, 4), CANCELLED)
    later = _booking(date(2025, 7, 1), date(2025, 7, 3))

    conflicts = find_conflicts(
        date(2025, 6, 3), date(2025, 6, 4), [pending, confirmed, cancelled, later]
    )

    assert conflicts == [pending, confirmed]


def test_find_conflicts_excludes_the_booking_being_edited() -> None:
    own = _booking(JUNE_1, JUNE_5)
    other = _booking(date(2025, 6, 5), date(2025, 6, 7))

    assert find_conflicts(JUNE_1, date(2025, 6, 3), [own, other], exclude_id=own.id) == []
    assert find_conflicts(JUNE_1, JUNE_5, [own, other], exclude_id=own.id) == [other]


def test_find_conflicts_empty_calendar() -> None:
    assert find_conflicts(JUNE_1, JUNE_5, []) == []

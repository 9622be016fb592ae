import pytest

from app.domain.booking_state import (
    BOOKING_STATUSES,
    CANCELLED,
    CONFIRMED,
    PENDING,
    assert_booking_transition,
    assert_valid_status,
    can_transition,
)
from app.domain.errors import IllegalTransition, InvalidFormat

ALLOWED = {
    (PENDING, PENDING),
    (PENDING, CONFIRMED),
    (PENDING, CANCELLED),
    (CONFIRMED, CONFIRMED),
    (CONFIRMED, CANCELLED),
}


@pytest.mark.parametrize("current", BOOKING_STATUSES)
@pytest.mark.parametrize("target", BOOKING_STATUSES)
def test_transition_table(current: str, target: str) -> None:
    if (current, target) in ALLOWED:
        assert_booking_transition(current, target)
        assert can_transition(current, target)
    else:
        with pytest.raises(IllegalTransition) as exc_info:
            assert_booking_transition(current, target)
        assert exc_info.value.current == current
        assert exc_info.value.requested == target
        assert not can_transition(current, target)


def test_confirmed_never_returns_to_pending() -> None:
    with pytest.raises(IllegalTransition) as exc_info:
        assert_booking_transition(CONFIRMED, PENDING)
    assert exc_info.value.to_dict() == {
        "code": "illegal_transition",
        "detail": "Invalid booking transition: Confirmed → Pending",
        "from": CONFIRMED,
        "to": PENDING,
    }


@pytest.mark.parametrize("status", ["confirmed", "PENDING", "Archived", ""])
def test_unknown_status_is_a_format_error(status: str) -> None:
    with pytest.raises(InvalidFormat) as exc_info:
        assert_valid_status(status)
    assert exc_info.value.field == "status"


def test_unknown_target_is_reported_before_transition_rules() -> None:
    # Even from the terminal state, a malformed target is a format problem.
    with pytest.raises(InvalidFormat):
        assert_booking_transition(CANCELLED, "Archived")

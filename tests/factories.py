"""Builders for booking requests and rows used across the test suite."""

from datetime import date, time
from decimal import Decimal
from typing import Any

from app.domain.booking_state import PENDING
from app.models.booking import Booking

TODAY = date(2025, 5, 20)


def booking_payload(**overrides: Any) -> dict[str, Any]:
    """A valid booking request; override any field."""
    payload: dict[str, Any] = {
        "first_name": "John",
        "last_name": "Doe",
        "phone": "+33612345678",
        "email": "john.doe@example.com",
        "booking_type": "Garden suite",
        "country": "France",
        "city": "Lyon",
        "address": "12 rue des Jardins",
        "check_in_date": date(2025, 6, 1),
        "check_out_date": date(2025, 6, 5),
        "arrival": time(15, 0),
        "total_price": Decimal("480.00"),
    }
    payload.update(overrides)
    return payload


def json_payload(**overrides: Any) -> dict[str, Any]:
    """``booking_payload`` with JSON-serializable values."""
    payload = booking_payload(**overrides)
    for key, value in payload.items():
        if isinstance(value, (date, time)):
            payload[key] = value.isoformat()
        elif isinstance(value, Decimal):
            payload[key] = str(value)
    return payload


def make_booking(**overrides: Any) -> Booking:
    """An unsaved Booking row, bypassing the service."""
    values = booking_payload(status=PENDING)
    values.update(overrides)
    return Booking(**values)

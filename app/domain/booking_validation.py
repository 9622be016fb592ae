"""Field normalization and validation for booking records.

``normalize_booking_fields`` is a pure function: it never looks at stored
bookings, only at the candidate record it is given.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal, InvalidOperation
from typing import Any

from app.domain.booking_state import assert_valid_status
from app.domain.errors import InvalidFormat, InvalidValue, MissingField

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9+_.-]+@(.+)$")
PHONE_PATTERN = re.compile(r"^\+?[0-9]{10,14}$")

# Checked in this order, so the first missing field is the one reported.
REQUIRED_TEXT_FIELDS = (
    "first_name",
    "last_name",
    "phone",
    "email",
    "booking_type",
    "country",
    "city",
    "address",
)

# Column widths of the bookings table.
MAX_LENGTHS = {
    "first_name": 100,
    "last_name": 100,
    "phone": 20,
    "email": 255,
    "booking_type": 50,
    "country": 100,
    "city": 100,
    "address": 255,
}

# total_price is stored as NUMERIC(PRICE_PRECISION, PRICE_SCALE).
PRICE_PRECISION = 10
PRICE_SCALE = 2
PRICE_STEP = Decimal(1).scaleb(-PRICE_SCALE)
MAX_PRICE = Decimal(10) ** (PRICE_PRECISION - PRICE_SCALE)


@dataclass(frozen=True)
class BookingFields:
    """A normalized booking record.

    ``status`` and ``total_price`` are None when the request did not carry them.
    """

    first_name: str
    last_name: str
    phone: str
    email: str
    booking_type: str
    country: str
    city: str
    address: str
    check_in_date: date
    check_out_date: date
    arrival: time
    status: str | None = None
    total_price: Decimal | None = None


def _trim(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _parse_date(field: str, value: Any) -> date:
    if value is None or value == "":
        raise MissingField(field)
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise InvalidFormat(field) from None


def _parse_time(field: str, value: Any) -> time:
    if value is None or value == "":
        raise MissingField(field)
    if isinstance(value, time):
        return value
    try:
        return time.fromisoformat(str(value))
    except ValueError:
        raise InvalidFormat(field) from None


def _parse_price(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidFormat("total_price")
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        raise InvalidFormat("total_price") from None
    if not price.is_finite():
        raise InvalidValue("total_price")
    if price < 0:
        raise InvalidValue("total_price", "Total price cannot be negative")
    if price >= MAX_PRICE:
        raise InvalidValue("total_price", f"Total price must be below {MAX_PRICE}")
    if price.quantize(PRICE_STEP) != price:
        raise InvalidValue(
            "total_price", f"Total price cannot have more than {PRICE_SCALE} decimal places"
        )
    return price


def normalize_email(email: str) -> str:
    if not EMAIL_PATTERN.match(email):
        raise InvalidFormat("email", "Invalid email format")
    return email.lower()


def normalize_phone(phone: str) -> str:
    if not PHONE_PATTERN.match(phone):
        raise InvalidFormat("phone", "Invalid phone number format")
    return phone


def normalize_booking_fields(data: Mapping[str, Any]) -> BookingFields:
    """Trim, validate and normalize a candidate booking record.

    Raises:
        MissingField: a required field is absent or blank after trimming
        InvalidFormat: email, phone, status or a date/time is malformed
        InvalidValue: a text field is too long, or total price is negative, too
            large or finer than cents
    """
    values = {key: _trim(value) for key, value in data.items()}

    for field in REQUIRED_TEXT_FIELDS:
        value = values.get(field)
        if value is None or not isinstance(value, str) or value == "":
            raise MissingField(field)
    for field in REQUIRED_TEXT_FIELDS:
        if len(values[field]) > MAX_LENGTHS[field]:
            raise InvalidValue(field, f"{field} must be at most {MAX_LENGTHS[field]} characters")

    email = normalize_email(values["email"])
    phone = normalize_phone(values["phone"])

    status = values.get("status")
    if status is not None:
        assert_valid_status(status)

    total_price = _parse_price(values.get("total_price"))

    return BookingFields(
        first_name=values["first_name"],
        last_name=values["last_name"],
        phone=phone,
        email=email,
        booking_type=values["booking_type"],
        country=values["country"],
        city=values["city"],
        address=values["address"],
        check_in_date=_parse_date("check_in_date", values.get("check_in_date")),
        check_out_date=_parse_date("check_out_date", values.get("check_out_date")),
        arrival=_parse_time("arrival", values.get("arrival")),
        status=status,
        total_price=total_price,
    )


def assert_stay_dates(check_in: date, check_out: date, today: date) -> None:
    """Cross-field date rules checked at write time."""
    if check_out < check_in:
        raise InvalidValue("check_out_date", "Check-out date must be after check-in date")
    if check_in < today:
        raise InvalidValue("check_in_date", "Check-in date cannot be in the past")

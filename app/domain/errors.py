"""Booking engine error kinds.

Every rejection raised by the booking engine is one of these. They carry the
structured details a caller needs to correct the request and know nothing
about HTTP; the API layer maps them to status codes.
"""

from collections.abc import Iterable
from typing import Any
from uuid import UUID


class BookingError(Exception):
    """Base class for booking engine rejections."""

    code = "booking_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        """Structured representation used in API error bodies."""
        return {"code": self.code, "detail": self.message}


class FieldError(BookingError):
    """A single field failed syntactic validation."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["field"] = self.field
        return data


class MissingField(FieldError):
    code = "missing_field"

    def __init__(self, field: str) -> None:
        super().__init__(field, f"{field} is required")


class InvalidFormat(FieldError):
    code = "invalid_format"

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(field, message or f"{field} has an invalid format")


class InvalidValue(FieldError):
    code = "invalid_value"

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(field, message or f"{field} has an invalid value")


class OverlapDetected(BookingError):
    code = "overlap_detected"

    def __init__(self, conflicting_ids: Iterable[UUID] = ()) -> None:
        self.conflicting_ids = list(conflicting_ids)
        super().__init__("Selected dates overlap with existing bookings")

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["conflicting_ids"] = [str(booking_id) for booking_id in self.conflicting_ids]
        return data


class IllegalTransition(BookingError):
    code = "illegal_transition"

    def __init__(self, current: str, requested: str) -> None:
        self.current = current
        self.requested = requested
        super().__init__(f"Invalid booking transition: {current} → {requested}")

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["from"] = self.current
        data["to"] = self.requested
        return data


class IllegalState(BookingError):
    code = "illegal_state"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class BookingNotFound(BookingError):
    code = "not_found"

    def __init__(self, booking_id: UUID | str) -> None:
        self.booking_id = booking_id
        super().__init__(f"Booking with ID '{booking_id}' not found")

"""Custom application exceptions."""

from fastapi import HTTPException, status

from app.domain.errors import (
    BookingError,
    BookingNotFound,
    FieldError,
    IllegalState,
    IllegalTransition,
    OverlapDetected,
)


class AppException(HTTPException):
    """Base application exception."""

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class RateLimitExceeded(AppException):
    """Rate limit exceeded exception."""

    def __init__(self, detail: str = "Too many requests. Please try again later.") -> None:
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=detail,
            headers={"Retry-After": "60"},
        )


# Booking engine error kinds → HTTP status. Most specific class first.
BOOKING_ERROR_STATUS: tuple[tuple[type[BookingError], int], ...] = (
    (FieldError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (OverlapDetected, status.HTTP_409_CONFLICT),
    (IllegalTransition, status.HTTP_409_CONFLICT),
    (IllegalState, status.HTTP_409_CONFLICT),
    (BookingNotFound, status.HTTP_404_NOT_FOUND),
)


def booking_error_status(exc: BookingError) -> int:
    """HTTP status code for a booking engine error."""
    for error_type, status_code in BOOKING_ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST

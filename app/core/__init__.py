"""Core utilities: exceptions, logging and middleware."""

from app.core.exceptions import (
    AppException,
    RateLimitExceeded,
    booking_error_status,
)
from app.core.logging import configure_logging

__all__ = [
    "AppException",
    "RateLimitExceeded",
    "booking_error_status",
    "configure_logging",
]

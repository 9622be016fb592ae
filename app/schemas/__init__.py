"""Pydantic schemas for API validation."""

from app.schemas.booking import (
    BookingCreate,
    BookingErrorResponse,
    BookingResponse,
    BookingSearchParams,
    BookingStatusUpdate,
    BookingUpdate,
)

__all__ = [
    "BookingCreate",
    "BookingErrorResponse",
    "BookingResponse",
    "BookingSearchParams",
    "BookingStatusUpdate",
    "BookingUpdate",
]

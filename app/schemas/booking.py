"""Booking-related Pydantic schemas."""

from datetime import date, datetime, time
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class BookingBase(BaseModel):
    """Base booking schema.

    Text fields are deliberately loose: trimming, required checks and format
    rules belong to the booking engine so that it reports typed field errors.
    """

    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    email: str | None = None
    booking_type: str | None = None
    country: str | None = None
    city: str | None = None
    address: str | None = None
    check_in_date: date | None = None
    check_out_date: date | None = None
    arrival: time | None = None
    total_price: Decimal | None = None


class BookingCreate(BookingBase):
    """Schema for creating a booking.

    A status sent by the client is validated but the booking always starts Pending.
    """

    status: str | None = None


class BookingUpdate(BookingBase):
    """Schema for replacing a booking's details (status is not editable here)."""

    status: str | None = None


class BookingStatusUpdate(BaseModel):
    """Schema for changing a booking's status."""

    status: str | None = None


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID

    # Guest
    first_name: str
    last_name: str
    phone: str
    email: str
    country: str
    city: str
    address: str

    # Stay
    check_in_date: date
    check_out_date: date
    arrival: time
    nights: int
    booking_type: str

    # Status & price
    status: str
    total_price: Decimal

    # Timestamps
    created_at: datetime
    updated_at: datetime


class BookingSearchParams(BaseModel):
    """Schema for booking search filters."""

    customer_name: str | None = Field(None, max_length=100)
    status: str | None = Field(None, pattern="^(Pending|Confirmed|Cancelled)$")
    start_date: date | None = None
    end_date: date | None = None
    min_price: Decimal | None = Field(None, ge=0)
    max_price: Decimal | None = Field(None, ge=0)


class BookingErrorResponse(BaseModel):
    """Schema for booking engine error bodies."""

    code: str
    detail: str
    field: str | None = None
    conflicting_ids: list[UUID] | None = None

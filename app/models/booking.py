"""Booking database model."""

from __future__ import annotations

import uuid
from datetime import date, datetime, time
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, DateTime, Numeric, String, Time, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.database import Base
from app.domain.booking_state import PENDING
from app.domain.booking_validation import MAX_LENGTHS, PRICE_PRECISION, PRICE_SCALE


class Booking(Base):
    """A stay reservation for the single bookable unit."""

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("check_out_date >= check_in_date", name="check_stay_order"),
        CheckConstraint(
            "status IN ('Pending', 'Confirmed', 'Cancelled')", name="check_booking_status"
        ),
        CheckConstraint("total_price >= 0", name="check_total_price"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Guest
    first_name: Mapped[str] = mapped_column(String(MAX_LENGTHS["first_name"]), nullable=False)
    last_name: Mapped[str] = mapped_column(String(MAX_LENGTHS["last_name"]), nullable=False)
    phone: Mapped[str] = mapped_column(String(MAX_LENGTHS["phone"]), nullable=False)
    email: Mapped[str] = mapped_column(String(MAX_LENGTHS["email"]), nullable=False, index=True)
    country: Mapped[str] = mapped_column(String(MAX_LENGTHS["country"]), nullable=False)
    city: Mapped[str] = mapped_column(String(MAX_LENGTHS["city"]), nullable=False)
    address: Mapped[str] = mapped_column(String(MAX_LENGTHS["address"]), nullable=False)

    # Stay
    check_in_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    check_out_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    arrival: Mapped[time] = mapped_column(Time, nullable=False)
    booking_type: Mapped[str] = mapped_column(String(MAX_LENGTHS["booking_type"]), nullable=False)

    # Status & price
    status: Mapped[str] = mapped_column(String(20), default=PENDING, index=True)
    total_price: Mapped[Decimal] = mapped_column(
        Numeric(PRICE_PRECISION, PRICE_SCALE), default=Decimal("0")
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    @property
    def nights(self) -> int:
        """Calculate number of nights."""
        return (self.check_out_date - self.check_in_date).days

    @property
    def guest_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return (
            f"<Booking {self.id} {self.check_in_date}..{self.check_out_date} {self.status}>"
        )

"""Booking persistence.

``BookingStore`` is the interface the booking service depends on;
``SqlAlchemyBookingStore`` implements it on an async SQLAlchemy session.
"""

from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from typing import Protocol
from uuid import UUID

from sqlalchemy import and_, delete, func, or_, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.booking_state import CANCELLED, CONFIRMED
from app.models.booking import Booking

# Arbitrary key for the transaction-scoped advisory lock that serializes
# overlap-check-then-write sequences on PostgreSQL.
BOOKING_CALENDAR_LOCK_KEY = 720_431_001


class BookingStore(Protocol):
    """Persistence operations the booking service needs."""

    async def insert(self, booking: Booking) -> Booking: ...

    async def find_by_id(self, booking_id: UUID) -> Booking | None: ...

    async def find_all(self) -> Sequence[Booking]: ...

    async def find_non_cancelled_overlapping(
        self, check_in: date, check_out: date, exclude_id: UUID | None = None
    ) -> Sequence[Booking]: ...

    async def update(self, booking: Booking) -> Booking: ...

    async def delete_by_id(self, booking_id: UUID) -> None: ...

    async def lock_booking_calendar(self) -> None: ...


class SqlAlchemyBookingStore:
    """Booking store backed by an ``AsyncSession``.

    Writes are flushed, not committed: the session owner (request dependency
    or task context) commits once the whole operation has succeeded.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def insert(self, booking: Booking) -> Booking:
        self.db.add(booking)
        await self.db.flush()
        await self.db.refresh(booking)
        return booking

    async def find_by_id(self, booking_id: UUID) -> Booking | None:
        result = await self.db.execute(select(Booking).where(Booking.id == booking_id))
        return result.scalar_one_or_none()

    async def find_all(self) -> Sequence[Booking]:
        result = await self.db.execute(
            select(Booking).order_by(Booking.check_in_date, Booking.created_at)
        )
        return result.scalars().all()

    async def find_non_cancelled_overlapping(
        self, check_in: date, check_out: date, exclude_id: UUID | None = None
    ) -> Sequence[Booking]:
        """Non-cancelled bookings sharing at least one day with [check_in, check_out]."""
        query = select(Booking).where(
            Booking.status != CANCELLED,
            or_(
                Booking.check_in_date.between(check_in, check_out),
                Booking.check_out_date.between(check_in, check_out),
                and_(Booking.check_in_date <= check_in, Booking.check_out_date >= check_in),
                and_(Booking.check_in_date <= check_out, Booking.check_out_date >= check_out),
            ),
        )
        if exclude_id is not None:
            query = query.where(Booking.id != exclude_id)
        result = await self.db.execute(query.order_by(Booking.check_in_date))
        return result.scalars().all()

    async def update(self, booking: Booking) -> Booking:
        await self.db.flush()
        await self.db.refresh(booking)
        return booking

    async def delete_by_id(self, booking_id: UUID) -> None:
        await self.db.execute(delete(Booking).where(Booking.id == booking_id))
        await self.db.flush()

    async def lock_booking_calendar(self) -> None:
        """Serialize calendar writers for the rest of the transaction.

        Only PostgreSQL supports this; other backends rely on the
        single-writer behaviour of the database itself.
        """
        bind = self.db.get_bind()
        if bind.dialect.name == "postgresql":
            await self.db.execute(
                text("SELECT pg_advisory_xact_lock(:key)"),
                {"key": BOOKING_CALENDAR_LOCK_KEY},
            )

    # ==================== QUERIES ====================

    async def search(
        self,
        customer_name: str | None = None,
        status: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
    ) -> Sequence[Booking]:
        """Search bookings; every criterion is optional."""
        query = select(Booking)
        if customer_name:
            pattern = f"%{customer_name.lower()}%"
            query = query.where(
                or_(
                    func.lower(Booking.first_name).like(pattern),
                    func.lower(Booking.last_name).like(pattern),
                )
            )
        if status:
            query = query.where(Booking.status == status)
        if start_date:
            query = query.where(Booking.check_in_date >= start_date)
        if end_date:
            query = query.where(Booking.check_out_date <= end_date)
        if min_price is not None:
            query = query.where(Booking.total_price >= min_price)
        if max_price is not None:
            query = query.where(Booking.total_price <= max_price)

        result = await self.db.execute(query.order_by(Booking.check_in_date))
        return result.scalars().all()

    async def find_upcoming(self, from_date: date) -> Sequence[Booking]:
        """Confirmed bookings checking in on or after ``from_date``."""
        result = await self.db.execute(
            select(Booking)
            .where(Booking.check_in_date >= from_date, Booking.status == CONFIRMED)
            .order_by(Booking.check_in_date)
        )
        return result.scalars().all()

    async def find_checking_in_on(self, day: date) -> Sequence[Booking]:
        result = await self.db.execute(
            select(Booking).where(Booking.check_in_date == day, Booking.status == CONFIRMED)
        )
        return result.scalars().all()

    async def find_by_email(self, email: str) -> Sequence[Booking]:
        result = await self.db.execute(
            select(Booking)
            .where(func.lower(Booking.email) == email.strip().lower())
            .order_by(Booking.check_in_date)
        )
        return result.scalars().all()

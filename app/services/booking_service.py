"""Booking lifecycle service.

Composes field normalization, overlap detection and the status state machine
into the create / update / status-change / delete operations. Every check runs
before the store is touched, so a rejected operation leaves no trace.
"""

import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from app.domain.booking_state import (
    CANCELLED,
    CONFIRMED,
    PENDING,
    assert_booking_transition,
)
from app.domain.booking_validation import (
    BookingFields,
    assert_stay_dates,
    normalize_booking_fields,
)
from app.domain.errors import (
    BookingError,
    BookingNotFound,
    IllegalState,
    MissingField,
    OverlapDetected,
)
from app.domain.overlap import find_conflicts
from app.models.booking import Booking
from app.repositories.booking_repository import BookingStore

logger = logging.getLogger(__name__)

OVERLAP_CONSTRAINT = "bookings_no_overlap"

# Fields copied from a normalized request onto a stored booking on update.
EDITABLE_FIELDS = (
    "first_name",
    "last_name",
    "phone",
    "email",
    "booking_type",
    "country",
    "city",
    "address",
    "check_in_date",
    "check_out_date",
    "arrival",
)


def is_overlap_violation(exc: IntegrityError) -> bool:
    """Whether a database error comes from the stay exclusion constraint."""
    orig = getattr(exc, "orig", None)
    diag = getattr(orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None) or ""
    if constraint_name:
        return constraint_name == OVERLAP_CONSTRAINT
    return OVERLAP_CONSTRAINT in str(orig if orig is not None else exc)


class BookingService:
    """Service for the booking lifecycle."""

    def __init__(self, store: BookingStore, today: Callable[[], date] = date.today) -> None:
        self.store = store
        self.today = today

    # ==================== READS ====================

    async def get_booking(self, booking_id: UUID) -> Booking:
        logger.debug(f"Fetching booking with ID: {booking_id}")
        booking = await self.store.find_by_id(booking_id)
        if booking is None:
            logger.warning(f"Booking {booking_id} not found")
            raise BookingNotFound(booking_id)
        return booking

    async def list_bookings(self) -> Sequence[Booking]:
        logger.debug("Fetching all bookings")
        return await self.store.find_all()

    # ==================== WRITES ====================

    async def create_booking(self, data: Mapping[str, Any]) -> Booking:
        """Validate and persist a new booking.

        The booking always starts as Pending; a missing price defaults to 0.
        """
        fields = self._normalize(data)
        logger.info(f"Creating new booking for {fields.first_name} {fields.last_name}")

        await self.store.lock_booking_calendar()
        await self._assert_no_overlap(fields.check_in_date, fields.check_out_date)
        self._assert_stay_dates(fields)

        booking = Booking(
            **{name: getattr(fields, name) for name in EDITABLE_FIELDS},
            status=PENDING,
            total_price=fields.total_price if fields.total_price is not None else Decimal("0"),
        )
        booking = await self._write(booking, self.store.insert, fields)
        logger.info(f"Created booking with ID: {booking.id}")
        return booking

    async def update_booking(self, booking_id: UUID, data: Mapping[str, Any]) -> Booking:
        """Replace a booking's guest and stay details.

        Status and identity are never changed here. A request without a price
        keeps the stored price.
        """
        logger.info(f"Updating booking with ID: {booking_id}")
        booking = await self.get_booking(booking_id)
        if booking.status == CANCELLED:
            logger.warning(f"Rejected update of cancelled booking {booking_id}")
            raise IllegalState("Cannot update cancelled booking")

        fields = self._normalize(data, booking_id)
        self._assert_stay_dates(fields, booking_id)

        await self.store.lock_booking_calendar()
        await self._assert_no_overlap(
            fields.check_in_date, fields.check_out_date, exclude_id=booking.id
        )

        for name in EDITABLE_FIELDS:
            setattr(booking, name, getattr(fields, name))
        if fields.total_price is not None:
            booking.total_price = fields.total_price

        booking = await self._write(booking, self.store.update, fields)
        logger.info(f"Successfully updated booking with ID: {booking_id}")
        return booking

    async def update_status(self, booking_id: UUID, new_status: str | None) -> Booking:
        """Move a booking through the status state machine."""
        logger.info(f"Attempting to update booking status: ID={booking_id}, newStatus={new_status}")
        booking = await self.get_booking(booking_id)

        requested = (new_status or "").strip()
        if not requested:
            logger.warning(f"Rejected status change for booking {booking_id}: no status given")
            raise MissingField("status")

        old_status = booking.status
        try:
            assert_booking_transition(old_status, requested)
        except BookingError as exc:
            logger.warning(f"Rejected status change for booking {booking_id}: {exc}")
            raise

        if requested == old_status:
            return booking

        booking.status = requested
        booking = await self.store.update(booking)
        logger.info(f"Successfully updated booking {booking_id} status from {old_status} to {requested}")
        return booking

    async def confirm_booking(self, booking_id: UUID) -> Booking:
        return await self.update_status(booking_id, CONFIRMED)

    async def cancel_booking(self, booking_id: UUID) -> Booking:
        return await self.update_status(booking_id, CANCELLED)

    async def delete_booking(self, booking_id: UUID) -> None:
        """Permanently remove a booking that is not confirmed."""
        logger.info(f"Attempting to delete booking with ID: {booking_id}")
        booking = await self.get_booking(booking_id)
        if booking.status == CONFIRMED:
            logger.warning(f"Rejected deletion of confirmed booking {booking_id}")
            raise IllegalState("Cannot delete confirmed booking")

        await self.store.delete_by_id(booking.id)
        logger.info(f"Successfully deleted booking with ID: {booking_id}")

    # ==================== HELPERS ====================

    def _normalize(self, data: Mapping[str, Any], booking_id: UUID | None = None) -> BookingFields:
        try:
            return normalize_booking_fields(data)
        except BookingError as exc:
            logger.warning(f"Rejected fields for booking {booking_id or '(new)'}: {exc.code} {exc}")
            raise

    def _assert_stay_dates(self, fields: BookingFields, booking_id: UUID | None = None) -> None:
        try:
            assert_stay_dates(fields.check_in_date, fields.check_out_date, self.today())
        except BookingError as exc:
            logger.warning(f"Rejected dates for booking {booking_id or '(new)'}: {exc.code} {exc}")
            raise

    async def _assert_no_overlap(
        self, check_in: date, check_out: date, exclude_id: UUID | None = None
    ) -> None:
        candidates = await self.store.find_non_cancelled_overlapping(
            check_in, check_out, exclude_id=exclude_id
        )
        conflicts = find_conflicts(check_in, check_out, candidates, exclude_id=exclude_id)
        if conflicts:
            conflicting_ids = [conflict.id for conflict in conflicts]
            logger.warning(
                f"Dates {check_in}..{check_out} overlap with bookings {conflicting_ids}"
            )
            raise OverlapDetected(conflicting_ids)

    async def _write(
        self,
        booking: Booking,
        write: Callable[[Booking], Awaitable[Booking]],
        fields: BookingFields,
    ) -> Booking:
        """Run a store write, turning an exclusion constraint hit into a conflict."""
        try:
            return await write(booking)
        except IntegrityError as exc:
            if not is_overlap_violation(exc):
                raise
            logger.warning(
                f"Exclusion constraint rejected {fields.check_in_date}..{fields.check_out_date}"
            )
            raise OverlapDetected() from exc

"""Celery background tasks for booking notifications."""

import asyncio
import logging
from collections.abc import Awaitable
from datetime import date, timedelta
from typing import Any
from uuid import UUID

from celery import shared_task

from app.database import close_db, get_db_context
from app.repositories.booking_repository import SqlAlchemyBookingStore
from app.services.notification_service import NotificationService, notification_service
from app.worker import celery_app  # noqa: F401  (makes the configured app current)

logger = logging.getLogger(__name__)


def run_async(coro: Awaitable[Any]) -> Any:
    """Run async work in the worker's sync context.

    Each task gets a fresh event loop, so pooled connections from a previous
    loop are discarded afterwards.
    """

    async def _runner() -> Any:
        try:
            return await coro
        finally:
            await notification_service.close()
            await close_db()

    return asyncio.run(_runner())


# ==================== BOOKING EMAILS ====================


@shared_task(bind=True, max_retries=3)
def send_booking_email(self, booking_id: str, notification_type: str):
    """Send a booking email for a stored booking.

    Enqueued by request handlers after a successful create or status change.
    """
    try:
        sent = run_async(_send_booking_email(UUID(booking_id), notification_type))
        return {"status": "success" if sent else "skipped", "booking_id": booking_id}
    except Exception as exc:
        logger.error(f"Sending {notification_type} email for booking {booking_id} failed: {exc}")
        raise self.retry(exc=exc, countdown=60)


async def _send_booking_email(booking_id: UUID, notification_type: str) -> bool:
    async with get_db_context() as db:
        booking = await SqlAlchemyBookingStore(db).find_by_id(booking_id)
        if booking is None:
            logger.warning(f"Booking {booking_id} no longer exists; skipping {notification_type}")
            return False
        return await notification_service.notify_booking(booking, notification_type)


# ==================== REMINDERS ====================


@shared_task(bind=True, max_retries=3)
def send_checkin_reminders(self):
    """Send reminders to guests of confirmed bookings checking in tomorrow."""
    try:
        count = run_async(_send_checkin_reminders(date.today() + timedelta(days=1)))
        return {"status": "success", "reminders": count}
    except Exception as exc:
        raise self.retry(exc=exc, countdown=300)


async def _send_checkin_reminders(day: date) -> int:
    async with get_db_context() as db:
        bookings = await SqlAlchemyBookingStore(db).find_checking_in_on(day)
        sent = 0
        for booking in bookings:
            if await notification_service.notify_booking(
                booking, NotificationService.BOOKING_REMINDER
            ):
                sent += 1
        logger.info(f"Sent {sent} check-in reminders for {day}")
        return sent


def enqueue_booking_email(booking_id: UUID, notification_type: str) -> None:
    """Queue a booking email without blocking the request."""
    try:
        send_booking_email.delay(str(booking_id), notification_type)
    except Exception as exc:
        # The booking is already committed; a broker outage must not fail the request.
        logger.error(f"Could not enqueue {notification_type} email for booking {booking_id}: {exc}")

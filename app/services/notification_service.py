"""Notification service for booking emails.

Emails go out through SendGrid's HTTP API. The booking engine itself never
sends anything; request handlers and Celery tasks call this after an
operation has succeeded.
"""

import logging
from datetime import UTC, datetime
from html import escape
from typing import Any

import httpx

from app.config import settings
from app.domain.booking_state import CANCELLED, CONFIRMED, PENDING
from app.models.booking import Booking

logger = logging.getLogger(__name__)

SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"


class NotificationService:
    """Service for sending booking notifications by email."""

    # Notification types
    BOOKING_REQUESTED = "booking_requested"
    BOOKING_CONFIRMED = "booking_confirmed"
    BOOKING_CANCELLED = "booking_cancelled"
    BOOKING_REMINDER = "booking_reminder"
    ADMIN_NEW_REQUEST = "admin_new_request"

    def __init__(self) -> None:
        """Initialize notification service."""
        self._http_client: httpx.AsyncClient | None = None

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-load HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=30.0)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: str | None = None,
    ) -> bool:
        """Send an email via SendGrid.

        Args:
            to_email: Recipient email
            subject: Email subject
            html_content: HTML body
            text_content: Plain text body

        Returns:
            bool: True if sent successfully
        """
        if not settings.sendgrid_api_key:
            logger.debug(f"SendGrid not configured; skipping email to {to_email}")
            return False

        headers = {
            "Authorization": f"Bearer {settings.sendgrid_api_key}",
            "Content-Type": "application/json",
        }
        payload: dict[str, Any] = {
            "personalizations": [{"to": [{"email": to_email}]}],
            "from": {
                "email": settings.email_from_address,
                "name": settings.email_from_name,
            },
            "subject": subject,
            "content": [{"type": "text/html", "value": html_content}],
        }
        if text_content:
            payload["content"].insert(0, {"type": "text/plain", "value": text_content})

        try:
            response = await self.http_client.post(SENDGRID_URL, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            logger.error(f"Email to {to_email} failed: {exc}")
            return False

        if response.status_code not in (200, 202):
            logger.error(f"SendGrid rejected email to {to_email}: {response.status_code}")
            return False
        return True

    def _generate_email_html(self, title: str, body: str) -> str:
        """Generate simple HTML email content."""
        return f"""
        <!DOCTYPE html>
        <html>
        <head><meta charset="utf-8"></head>
        <body style="font-family: sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; color: #333;">
            <h1 style="font-size: 22px;">{escape(title)}</h1>
            <p style="font-size: 16px; line-height: 1.6;">{escape(body)}</p>
            <p style="color: #9ca3af; font-size: 12px; margin-top: 24px;">
                &copy; {datetime.now(UTC).year} {settings.email_from_name}
            </p>
        </body>
        </html>
        """

    def build_booking_message(self, booking: Booking, notification_type: str) -> tuple[str, str]:
        """Subject and body for a guest-facing booking email."""
        stay = f"from {booking.check_in_date:%d %b %Y} to {booking.check_out_date:%d %b %Y}"
        if notification_type == self.BOOKING_CONFIRMED:
            return (
                "Your reservation is confirmed",
                f"Dear {booking.guest_name}, your stay {stay} is confirmed. "
                f"We look forward to welcoming you at {booking.arrival:%H:%M}.",
            )
        if notification_type == self.BOOKING_CANCELLED:
            return (
                "Your reservation has been cancelled",
                f"Dear {booking.guest_name}, your reservation {stay} has been cancelled.",
            )
        if notification_type == self.BOOKING_REMINDER:
            return (
                "Your stay starts tomorrow",
                f"Dear {booking.guest_name}, we are expecting you tomorrow around "
                f"{booking.arrival:%H:%M}.",
            )
        if notification_type == self.ADMIN_NEW_REQUEST:
            return (
                f"New reservation request: {booking.guest_name}",
                f"{booking.guest_name} ({booking.email}, {booking.phone}) requested a "
                f"{booking.booking_type} stay {stay}. Booking ID: {booking.id}",
            )
        return (
            "We received your reservation request",
            f"Dear {booking.guest_name}, we received your request for a stay {stay}. "
            "We will confirm it shortly.",
        )

    async def notify_booking(self, booking: Booking, notification_type: str) -> bool:
        """Email the guest (or the administrator) about a booking event."""
        if notification_type == self.ADMIN_NEW_REQUEST:
            recipient = settings.booking_admin_email
            if not recipient:
                return False
        else:
            recipient = booking.email

        subject, body = self.build_booking_message(booking, notification_type)
        sent = await self.send_email(
            to_email=recipient,
            subject=subject,
            html_content=self._generate_email_html(subject, body),
            text_content=body,
        )
        if sent:
            logger.info(f"Sent {notification_type} email for booking {booking.id}")
        return sent


def status_notification_type(status: str) -> str | None:
    """Notification sent after a booking moves to ``status``, if any."""
    return {
        PENDING: None,
        CONFIRMED: NotificationService.BOOKING_CONFIRMED,
        CANCELLED: NotificationService.BOOKING_CANCELLED,
    }.get(status)


# Singleton instance
notification_service = NotificationService()

import json
from datetime import date

import httpx
import pytest

from app.config import settings
from app.services.notification_service import (
    SENDGRID_URL,
    NotificationService,
    status_notification_type,
)
from tests.factories import make_booking


@pytest.fixture
def sent_requests(monkeypatch) -> list[httpx.Request]:
    monkeypatch.setattr(settings, "sendgrid_api_key", "SG.test-key")
    return []


def _service(sent_requests: list[httpx.Request], status_code: int = 202) -> NotificationService:
    def handler(request: httpx.Request) -> httpx.Response:
        sent_requests.append(request)
        return httpx.Response(status_code)

    service = NotificationService()
    service._http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return service


async def test_send_email_skipped_without_api_key(monkeypatch) -> None:
    monkeypatch.setattr(settings, "sendgrid_api_key", None)
    service = NotificationService()

    assert await service.send_email("guest@example.com", "Hi", "<p>Hi</p>") is False
    assert service._http_client is None


async def test_send_email_posts_to_sendgrid(sent_requests) -> None:
    service = _service(sent_requests)

    assert await service.send_email("guest@example.com", "Hi", "<p>Hi</p>", "Hi") is True

    request = sent_requests[0]
    assert str(request.url) == SENDGRID_URL
    assert request.headers["Authorization"] == "Bearer SG.test-key"
    payload = json.loads(request.content)
    assert payload["personalizations"] == [{"to": [{"email": "guest@example.com"}]}]
    assert [c["type"] for c in payload["content"]] == ["text/plain", "text/html"]
    await service.close()


async def test_send_email_reports_rejection(sent_requests) -> None:
    service = _service(sent_requests, status_code=401)

    assert await service.send_email("guest@example.com", "Hi", "<p>Hi</p>") is False
    await service.close()


async def test_send_email_survives_transport_errors(sent_requests) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    service = NotificationService()
    service._http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))

    assert await service.send_email("guest@example.com", "Hi", "<p>Hi</p>") is False
    await service.close()


async def test_notify_guest_of_confirmation(sent_requests) -> None:
    service = _service(sent_requests)
    booking = make_booking(email="jane@example.com", first_name="Jane")

    assert await service.notify_booking(booking, NotificationService.BOOKING_CONFIRMED)

    payload = json.loads(sent_requests[0].content)
    assert payload["personalizations"][0]["to"][0]["email"] == "jane@example.com"
    assert payload["subject"] == "Your reservation is confirmed"
    await service.close()


async def test_admin_notification_needs_an_address(sent_requests, monkeypatch) -> None:
    service = _service(sent_requests)
    monkeypatch.setattr(settings, "booking_admin_email", None)

    assert await service.notify_booking(make_booking(), NotificationService.ADMIN_NEW_REQUEST) is False
    assert sent_requests == []

    monkeypatch.setattr(settings, "booking_admin_email", "owner@example.com")
    assert await service.notify_booking(make_booking(), NotificationService.ADMIN_NEW_REQUEST)
    payload = json.loads(sent_requests[0].content)
    assert payload["personalizations"][0]["to"][0]["email"] == "owner@example.com"
    await service.close()


def test_booking_messages() -> None:
    service = NotificationService()
    booking = make_booking(check_in_date=date(2025, 6, 1), check_out_date=date(2025, 6, 5))

    subject, body = service.build_booking_message(booking, NotificationService.BOOKING_REQUESTED)
    assert subject == "We received your reservation request"
    assert "from 01 Jun 2025 to 05 Jun 2025" in body

    subject, body = service.build_booking_message(booking, NotificationService.BOOKING_CANCELLED)
    assert "cancelled" in subject
    assert "John Doe" in body

    subject, _ = service.build_booking_message(booking, NotificationService.ADMIN_NEW_REQUEST)
    assert subject == "New reservation request: John Doe"


def test_email_html_escapes_guest_input() -> None:
    html = NotificationService()._generate_email_html("Hello", "<script>alert(1)</script>")

    assert "<script>" not in html
    assert "&lt;script&gt;" in html


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        ("Pending", None),
        ("Confirmed", NotificationService.BOOKING_CONFIRMED),
        ("Cancelled", NotificationService.BOOKING_CANCELLED),
    ],
)
def test_status_notification_type(status: str, expected: str | None) -> None:
    assert status_notification_type(status) == expected

"""Booking endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_booking_service, get_booking_store, get_db
from app.core.middleware import booking_limiter
from app.models.booking import Booking
from app.repositories.booking_repository import SqlAlchemyBookingStore
from app.schemas.booking import (
    BookingCreate,
    BookingErrorResponse,
    BookingResponse,
    BookingSearchParams,
    BookingStatusUpdate,
    BookingUpdate,
)
from app.services.booking_service import BookingService
from app.services.notification_service import NotificationService, status_notification_type
from app.tasks import enqueue_booking_email

router = APIRouter()

ERROR_RESPONSES = {
    404: {"model": BookingErrorResponse},
    409: {"model": BookingErrorResponse},
    422: {"model": BookingErrorResponse},
}


@router.post(
    "/",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(booking_limiter)],
)
async def create_booking(
    booking_data: BookingCreate,
    service: Annotated[BookingService, Depends(get_booking_service)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Submit a new reservation request. It always starts as Pending."""
    booking = await service.create_booking(booking_data.model_dump())
    await db.commit()

    enqueue_booking_email(booking.id, NotificationService.BOOKING_REQUESTED)
    enqueue_booking_email(booking.id, NotificationService.ADMIN_NEW_REQUEST)
    return booking


@router.get("/", response_model=list[BookingResponse])
async def list_bookings(
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> list[Booking]:
    """List all bookings ordered by check-in date."""
    return list(await service.list_bookings())


@router.get("/search", response_model=list[BookingResponse])
async def search_bookings(
    store: Annotated[SqlAlchemyBookingStore, Depends(get_booking_store)],
    params: Annotated[BookingSearchParams, Query()],
) -> list[Booking]:
    """Search bookings by guest name, status, stay window and price range."""
    return list(await store.search(**params.model_dump()))


@router.get("/upcoming", response_model=list[BookingResponse])
async def upcoming_bookings(
    store: Annotated[SqlAlchemyBookingStore, Depends(get_booking_store)],
    from_date: date | None = Query(default=None),
) -> list[Booking]:
    """Confirmed bookings checking in today or later."""
    return list(await store.find_upcoming(from_date or date.today()))


@router.get("/{booking_id}", response_model=BookingResponse, responses=ERROR_RESPONSES)
async def get_booking(
    booking_id: UUID,
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> Booking:
    """Get a booking by ID."""
    return await service.get_booking(booking_id)


@router.put("/{booking_id}", response_model=BookingResponse, responses=ERROR_RESPONSES)
async def update_booking(
    booking_id: UUID,
    booking_data: BookingUpdate,
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> Booking:
    """Replace a booking's guest and stay details."""
    return await service.update_booking(booking_id, booking_data.model_dump())


@router.patch(
    "/{booking_id}/status", response_model=BookingResponse, responses=ERROR_RESPONSES
)
async def update_booking_status(
    booking_id: UUID,
    request: BookingStatusUpdate,
    service: Annotated[BookingService, Depends(get_booking_service)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Confirm or cancel a booking."""
    previous = (await service.get_booking(booking_id)).status
    booking = await service.update_status(booking_id, request.status)
    await db.commit()

    notification_type = status_notification_type(booking.status)
    if notification_type and booking.status != previous:
        enqueue_booking_email(booking.id, notification_type)
    return booking


@router.delete(
    "/{booking_id}", status_code=status.HTTP_204_NO_CONTENT, responses=ERROR_RESPONSES
)
async def delete_booking(
    booking_id: UUID,
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> Response:
    """Delete a booking. Confirmed bookings must be cancelled first."""
    await service.delete_booking(booking_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

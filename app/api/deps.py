"""API dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.repositories.booking_repository import SqlAlchemyBookingStore
from app.services.booking_service import BookingService


async def get_booking_store(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SqlAlchemyBookingStore:
    """Booking store bound to the request session."""
    return SqlAlchemyBookingStore(db)


async def get_booking_service(
    store: Annotated[SqlAlchemyBookingStore, Depends(get_booking_store)],
) -> BookingService:
    """Booking service bound to the request session."""
    return BookingService(store)


__all__ = ["get_db", "get_booking_store", "get_booking_service"]

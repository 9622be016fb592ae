import os

os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite:///:memory:")
os.environ["ENVIRONMENT"] = "development"
os.environ.pop("SENDGRID_API_KEY", None)

from collections.abc import AsyncGenerator  # noqa: E402
from typing import Any  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi import Depends  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

# Import models so Base.metadata is populated for create_all.
import app.models  # noqa: E402,F401
from app.api import deps  # noqa: E402
from app.api.v1 import bookings as bookings_api  # noqa: E402
from app.core.middleware import booking_limiter  # noqa: E402
from app.database import Base, get_db  # noqa: E402
from app.main import app as fastapi_app  # noqa: E402
from app.repositories.booking_repository import SqlAlchemyBookingStore  # noqa: E402
from app.services.booking_service import BookingService  # noqa: E402
from tests.factories import TODAY  # noqa: E402


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(db_session) -> SqlAlchemyBookingStore:
    return SqlAlchemyBookingStore(db_session)


@pytest.fixture
def service(store) -> BookingService:
    return BookingService(store, today=lambda: TODAY)


@pytest.fixture
def enqueued(monkeypatch) -> list[tuple[Any, str]]:
    """Capture booking emails queued by request handlers."""
    calls: list[tuple[Any, str]] = []
    monkeypatch.setattr(
        bookings_api,
        "enqueue_booking_email",
        lambda booking_id, notification_type: calls.append((booking_id, notification_type)),
    )
    return calls


@pytest.fixture
async def client(session_factory, enqueued) -> AsyncGenerator[httpx.AsyncClient, None]:
    async def _get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def _get_service(
        store: SqlAlchemyBookingStore = Depends(deps.get_booking_store),
    ) -> BookingService:
        return BookingService(store, today=lambda: TODAY)

    async def _no_limit() -> None:
        return None

    fastapi_app.dependency_overrides[get_db] = _get_db
    fastapi_app.dependency_overrides[deps.get_booking_service] = _get_service
    fastapi_app.dependency_overrides[booking_limiter] = _no_limit

    transport = httpx.ASGITransport(app=fastapi_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    fastapi_app.dependency_overrides.clear()

import os

# Must be set before flight_booking reads its settings
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["LOG_JSON"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"

from datetime import datetime
from decimal import Decimal

import pytest
import pytest_asyncio
from fastapi.encoders import jsonable_encoder
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select

from flight_booking.core.config import get_settings
from flight_booking.core.database import Database
from flight_booking.core.security import create_access_token
from flight_booking.main import create_app
from flight_booking.models import City
from flight_booking.schemas import FlightCreate
from flight_booking.scripts.seed_data import seed_reference_data
from flight_booking.services import BookingService

USER_EMAIL = "alice@example.com"
OTHER_USER_EMAIL = "bob@example.com"


class FakeNotifier:
    """Records confirmations instead of talking to SMTP"""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    def send_ticket_confirmation(self, ticket: dict) -> bool:
        if self.fail:
            raise ConnectionError("SMTP server unavailable")
        self.sent.append(ticket)
        return True


@pytest.fixture
def settings():
    return get_settings()


@pytest_asyncio.fixture
async def database(tmp_path, settings):
    """Fresh SQLite file per test, with tables and reference data"""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'flights.db'}")
    await db.create_all()
    await seed_reference_data(db, settings)

    yield db

    await db.disconnect()


@pytest_asyncio.fixture
async def city_ids(database):
    """City name -> id"""
    async with database.session() as session:
        result = await session.execute(select(City.name, City.id))
        return dict(result.all())


@pytest.fixture
def flight_fields(city_ids):
    """Builder for Ankara -> Istanbul flight fields"""

    def _fields(seats_total: int = 3, **overrides) -> dict:
        fields = {
            "from_city": city_ids["Ankara"],
            "to_city": city_ids["İstanbul"],
            "departure_time": datetime(2030, 6, 1, 9, 30),
            "arrival_time": datetime(2030, 6, 1, 11, 0),
            "price": Decimal("149.90"),
            "seats_total": seats_total,
        }
        fields.update(overrides)
        return fields

    return _fields


@pytest.fixture
def flight_json(flight_fields):
    """Same fields, encoded for an HTTP request body"""

    def _json(seats_total: int = 3, **overrides) -> dict:
        return jsonable_encoder(flight_fields(seats_total, **overrides))

    return _json


@pytest_asyncio.fixture
async def make_flight(database, flight_fields):
    """Factory creating a flight through the booking service"""

    async def _make(seats_total: int = 3, **overrides):
        data = FlightCreate(**flight_fields(seats_total, **overrides))
        async with database.session() as session:
            return await BookingService(session).create_flight(data)

    return _make


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest_asyncio.fixture
async def client(database, settings, notifier):
    app = create_app(settings=settings, database=database, notifier=notifier)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def _bearer(email: str, is_admin: bool, settings) -> dict:
    token = create_access_token(
        email=email,
        is_admin=is_admin,
        secret=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(settings):
    return _bearer(settings.ADMIN_EMAIL, True, settings)


@pytest.fixture
def user_headers(settings):
    return _bearer(USER_EMAIL, False, settings)


@pytest.fixture
def other_user_headers(settings):
    return _bearer(OTHER_USER_EMAIL, False, settings)

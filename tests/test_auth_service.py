"""
Auth service tests: registration on shared and racing sessions
"""
from unittest.mock import AsyncMock

import pytest

from flight_booking.core.exceptions import UserAlreadyExistsError
from flight_booking.services import AuthService


@pytest.mark.asyncio
async def test_register_after_lookup_on_same_session(database, settings):
    async with database.session() as session:
        service = AuthService(session, settings)
        assert await service.get_user("frank@example.com") is None

        user = await service.register_user("frank@example.com", "secret1")

    assert user.email == "frank@example.com"
    assert user.is_admin is False

    async with database.session() as session:
        assert await AuthService(session, settings).get_user("frank@example.com") is not None


@pytest.mark.asyncio
async def test_register_duplicate(database, settings):
    async with database.session() as session:
        await AuthService(session, settings).register_user("gina@example.com", "secret1")

    async with database.session() as session:
        with pytest.raises(UserAlreadyExistsError):
            await AuthService(session, settings).register_user("gina@example.com", "secret2")


@pytest.mark.asyncio
async def test_register_race_lost_at_insert(database, settings, monkeypatch):
    """The existence check passed, but another registration committed first"""
    async with database.session() as session:
        await AuthService(session, settings).register_user("hank@example.com", "secret1")

    monkeypatch.setattr(AuthService, "get_user", AsyncMock(return_value=None))

    async with database.session() as session:
        with pytest.raises(UserAlreadyExistsError):
            await AuthService(session, settings).register_user("hank@example.com", "secret2")

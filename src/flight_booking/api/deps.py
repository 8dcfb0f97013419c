"""
FastAPI Dependencies
"""
from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from flight_booking.core.config import Settings
from flight_booking.core.exceptions import AuthError, ForbiddenError
from flight_booking.schemas.auth import CurrentUser
from flight_booking.services.auth_service import AuthService

bearer_scheme = HTTPBearer(auto_error=False)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """One session per request from the app's database handle"""
    async with request.app.state.database.session() as session:
        yield session


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_notifier(request: Request):
    return request.app.state.notifier


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
) -> CurrentUser:
    """Validate 'Authorization: Bearer <token>' and return the caller"""
    if credentials is None:
        if not request.headers.get('Authorization'):
            raise AuthError("No authorization header provided")
        raise AuthError("Malformed authorization header")

    return AuthService.authenticate_token(credentials.credentials, settings)


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise ForbiddenError("Admin access required")
    return user

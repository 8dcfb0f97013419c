"""Auth API endpoints"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from flight_booking.api.deps import get_app_settings, get_current_user, get_db
from flight_booking.core.config import Settings
from flight_booking.middleware.rate_limiter import limiter
from flight_booking.schemas import CurrentUser, LoginRequest, RegisterRequest, TokenResponse
from flight_booking.services import AuthService

router = APIRouter()


@router.post("/auth/register", status_code=201)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Create a regular (non-admin) account"""
    user = await AuthService(db, settings).register_user(payload.email, payload.password)
    return {"email": user.email}


@router.post("/auth/login", response_model=TokenResponse)
@limiter.limit("10/minute")
async def login(
    request: Request,
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Exchange email and password for a bearer token"""
    token = await AuthService(db, settings).login(payload.email, payload.password)
    return TokenResponse(token=token)


@router.get("/auth/me", response_model=CurrentUser)
async def me(user: CurrentUser = Depends(get_current_user)):
    return user


@router.post("/auth/logout")
async def logout():
    # Tokens are stateless; the client drops its copy
    return {"success": True}

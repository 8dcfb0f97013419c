"""
Auth Service - account registration, login and bearer token validation
"""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from flight_booking.core.config import Settings
from flight_booking.core.database import write_transaction
from flight_booking.core.exceptions import AuthError, UserAlreadyExistsError
from flight_booking.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from flight_booking.models import User
from flight_booking.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)


class AuthService:
    """Service for user accounts and JWT credentials"""

    def __init__(self, session: AsyncSession, settings: Settings):
        self.session = session
        self.settings = settings

    async def get_user(self, email: str) -> Optional[User]:
        return await self.session.get(User, email)

    async def register_user(self, email: str, password: str, is_admin: bool = False) -> User:
        """
        Create an account

        Raises:
            UserAlreadyExistsError: the email is taken
        """
        try:
            async with write_transaction(self.session):
                if await self.get_user(email):
                    raise UserAlreadyExistsError(f"User {email} already exists")

                user = User(email=email, password_hash=hash_password(password), is_admin=is_admin)
                self.session.add(user)
        except IntegrityError as e:
            # Lost a race with a concurrent registration of the same email
            raise UserAlreadyExistsError(f"User {email} already exists") from e

        logger.info(f"Registered user {email}", extra={'user_email': email})
        return user

    async def login(self, email: str, password: str) -> str:
        """Check credentials and issue a bearer token"""
        user = await self.get_user(email)
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt", extra={'user_email': email})
            raise AuthError("Invalid credentials")

        return self.issue_token(user)

    def issue_token(self, user: User) -> str:
        return create_access_token(
            email=user.email,
            is_admin=user.is_admin,
            secret=self.settings.SECRET_KEY,
            algorithm=self.settings.ALGORITHM,
            expires_minutes=self.settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        )

    @staticmethod
    def authenticate_token(token: str, settings: Settings) -> CurrentUser:
        """Turn a bearer token into the caller's identity; AuthError if invalid"""
        payload = decode_access_token(token, settings.SECRET_KEY, settings.ALGORITHM)
        return CurrentUser(email=payload['email'], is_admin=bool(payload.get('isAdmin', False)))

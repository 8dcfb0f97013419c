"""
Password hashing and JWT helpers
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
import jwt

from flight_booking.core.exceptions import AuthError


def hash_password(plain_password: str) -> str:
    password_bytes = plain_password.encode('utf-8')
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


def create_access_token(
    email: str,
    is_admin: bool,
    secret: str,
    algorithm: str = "HS256",
    expires_minutes: int = 60,
) -> str:
    """Create a bearer token carrying the caller's email and admin flag"""
    now = datetime.now(timezone.utc)
    payload = {
        'email': email,
        'isAdmin': bool(is_admin),
        'iat': int(now.timestamp()),
        'exp': int((now + timedelta(minutes=expires_minutes)).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(token: str, secret: str, algorithm: str = "HS256") -> Dict[str, Any]:
    """Decode and verify a bearer token, raising AuthError on any failure"""
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.PyJWTError as e:
        raise AuthError("Invalid or expired token") from e

    if 'email' not in payload:
        raise AuthError("Invalid or expired token")
    return payload

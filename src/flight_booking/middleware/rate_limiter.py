"""
Rate limiting using SlowAPI
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from flight_booking.core.config import get_settings

_settings = get_settings()

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=_settings.RATE_LIMIT_STORAGE_URI,
    enabled=_settings.RATE_LIMIT_ENABLED,
    strategy="fixed-window",
)

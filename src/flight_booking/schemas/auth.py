"""
Pydantic schemas for authentication
"""
from pydantic import BaseModel, Field

from flight_booking.schemas.ticket import EMAIL_PATTERN


class RegisterRequest(BaseModel):
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=1, max_length=72)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    token: str


class CurrentUser(BaseModel):
    """Identity carried by a validated bearer token"""
    email: str
    is_admin: bool = Field(False, serialization_alias="isAdmin")

"""Pydantic schemas for Ticket resources"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

EMAIL_PATTERN = r'^[^\s@]+@[^\s@]+\.[^\s@]+$'


class TicketCreate(BaseModel):
    passenger_name: str = Field(..., min_length=1, max_length=255)
    passenger_surname: str = Field(..., min_length=1, max_length=255)
    passenger_email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    flight_id: int = Field(..., gt=0)
    seat_number: str = Field(..., min_length=1, max_length=10)

    @field_validator('passenger_name', 'passenger_surname')
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('must not be blank')
        return v

    @field_validator('seat_number', mode='before')
    @classmethod
    def seat_number_as_label(cls, v):
        # Clients send the label either as a number or as a string
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class TicketResponse(BaseModel):
    id: int
    passenger_name: str
    passenger_surname: str
    passenger_email: str
    flight_id: int
    seat_id: int
    seat_number: str
    booked_by: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_ticket(cls, ticket):
        """Convert Ticket ORM model (with its seat loaded) to response"""
        return cls(
            id=ticket.id,
            passenger_name=ticket.passenger_name,
            passenger_surname=ticket.passenger_surname,
            passenger_email=ticket.passenger_email,
            flight_id=ticket.flight_id,
            seat_id=ticket.seat_id,
            seat_number=ticket.seat_number,
            booked_by=ticket.booked_by,
            created_at=ticket.created_at,
        )

"""
Pydantic schemas for Flight resources
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from flight_booking.schemas.seat import SeatResponse


class FlightBase(BaseModel):
    """Base Flight schema"""
    from_city: int = Field(..., gt=0, description="Origin city id")
    to_city: int = Field(..., gt=0, description="Destination city id")
    departure_time: datetime = Field(..., description="Departure time")
    arrival_time: datetime = Field(..., description="Arrival time")
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, description="Ticket price")
    seats_total: int = Field(..., ge=0, description="Seat capacity")

    @field_validator('departure_time', 'arrival_time')
    @classmethod
    def as_naive_utc(cls, v: datetime) -> datetime:
        # Stored as naive UTC
        if v.tzinfo is not None:
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class FlightCreate(FlightBase):
    """Body of POST /flights; seats 1..seats_total are seeded"""


class FlightUpdate(FlightBase):
    """Body of PUT /flights/{id}; a changed seats_total resizes the seat pool"""


class FlightResponse(FlightBase):
    """Flight response schema"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    seats_available: int = Field(..., description="Seats still free")
    is_sold_out: bool
    created_at: datetime
    updated_at: datetime
    seats: List[SeatResponse] = Field(default_factory=list)

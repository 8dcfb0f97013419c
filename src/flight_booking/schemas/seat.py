"""
Pydantic schemas for Seat resources
"""
from pydantic import BaseModel, ConfigDict, Field


class SeatResponse(BaseModel):
    """Seat response schema"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    flight_id: int
    seat_number: str = Field(..., description="Seat label, '1'..'N'")
    is_booked: bool

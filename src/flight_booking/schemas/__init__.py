"""
Pydantic schemas for API request/response validation
"""
from flight_booking.schemas.auth import CurrentUser, LoginRequest, RegisterRequest, TokenResponse
from flight_booking.schemas.city import CityResponse
from flight_booking.schemas.flight import FlightBase, FlightCreate, FlightResponse, FlightUpdate
from flight_booking.schemas.seat import SeatResponse
from flight_booking.schemas.ticket import TicketCreate, TicketResponse

__all__ = [
    # Auth
    "CurrentUser",
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    # Cities
    "CityResponse",
    # Flights
    "FlightBase",
    "FlightCreate",
    "FlightUpdate",
    "FlightResponse",
    # Seats
    "SeatResponse",
    # Tickets
    "TicketCreate",
    "TicketResponse",
]

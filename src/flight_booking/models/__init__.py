"""
SQLAlchemy Models for the Flight Ticket Booking System

Import all models here for easy access and to ensure proper relationship setup.
"""
from flight_booking.core.database import Base

# Import all models to register them with SQLAlchemy
from flight_booking.models.city import City
from flight_booking.models.flight import Flight
from flight_booking.models.seat import Seat
from flight_booking.models.ticket import Ticket
from flight_booking.models.user import User

# Export all models
__all__ = [
    "Base",
    "City",
    "Flight",
    "Seat",
    "Ticket",
    "User",
]

"""
API routers
"""
from flight_booking.api import auth, cities, flights, tickets

__all__ = ["auth", "cities", "flights", "tickets"]

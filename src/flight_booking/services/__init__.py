"""
Services package exports
"""
from flight_booking.services.auth_service import AuthService
from flight_booking.services.booking_service import BookingService
from flight_booking.services.city_service import CityService
from flight_booking.services.flight_service import FlightService
from flight_booking.services.notification_service import EmailNotifier, notify_ticket_purchased
from flight_booking.services.seat_ledger import SeatLedger

__all__ = [
    "AuthService",
    "BookingService",
    "CityService",
    "FlightService",
    "EmailNotifier",
    "notify_ticket_purchased",
    "SeatLedger",
]

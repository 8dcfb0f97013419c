"""
Exception taxonomy shared by services and the HTTP boundary

Each class carries the status code and error code the API maps it to.
"""
from typing import List, Optional


class FlightBookingError(Exception):
    """Base exception for booking system errors"""
    status_code = 400
    error_code = "booking_error"


class ValidationError(FlightBookingError):
    """Raised when input is malformed or missing"""
    status_code = 400
    error_code = "validation_error"

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or [message]


# ==================== Not found ====================

class NotFoundError(FlightBookingError):
    status_code = 404
    error_code = "not_found"


class FlightNotFoundError(NotFoundError):
    """Raised when flight doesn't exist"""

    def __init__(self, flight_id: int):
        super().__init__(f"Flight {flight_id} not found")
        self.flight_id = flight_id


class CityNotFoundError(NotFoundError):
    """Raised when a city id is not in the directory"""

    def __init__(self, city_id: int):
        super().__init__(f"City {city_id} not found")
        self.city_id = city_id


class SeatNotFoundError(NotFoundError):
    """Raised when the seat does not exist on the given flight"""

    def __init__(self, flight_id: int, label: str):
        super().__init__(f"Seat {label} not found or does not belong to flight {flight_id}")
        self.flight_id = flight_id
        self.label = label


class TicketNotFoundError(NotFoundError):
    def __init__(self, ticket_id: int):
        super().__init__("Ticket not found")
        self.ticket_id = ticket_id


# ==================== Conflicts ====================

class ConflictError(FlightBookingError):
    status_code = 409
    error_code = "conflict"


class SeatAlreadyBookedError(ConflictError):
    """Raised when purchasing a seat that is already booked"""
    error_code = "seat_already_booked"

    def __init__(self, flight_id: int, label: str):
        super().__init__(f"Seat {label} on flight {flight_id} is already booked")
        self.flight_id = flight_id
        self.label = label


class SeatBookedError(ConflictError):
    """Raised when removing a seat that is still booked"""
    error_code = "seat_booked"

    def __init__(self, flight_id: int, label: str):
        super().__init__(f"Cannot remove seat {label} from flight {flight_id}: seat is booked")
        self.flight_id = flight_id
        self.label = label


class FlightHasTicketsError(ConflictError):
    error_code = "flight_has_tickets"

    def __init__(self, flight_id: int, ticket_count: int):
        super().__init__(
            f"Flight {flight_id} has {ticket_count} ticket(s); cancel them before deleting"
        )
        self.flight_id = flight_id
        self.ticket_count = ticket_count


class UserAlreadyExistsError(ConflictError):
    error_code = "user_exists"


# ==================== Auth ====================

class AuthError(FlightBookingError):
    """Missing, malformed, invalid or expired credential"""
    status_code = 401
    error_code = "unauthorized"


class ForbiddenError(FlightBookingError):
    """Valid credential lacking the required rights"""
    status_code = 403
    error_code = "forbidden"


# ==================== Storage ====================

class StorageError(FlightBookingError):
    """Unexpected persistence failure"""
    status_code = 500
    error_code = "storage_error"

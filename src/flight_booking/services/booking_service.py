"""
Booking Service - atomic purchase, cancel and seat-pool resize

Every public mutation runs as exactly one database transaction. The flight
row is locked first (SELECT ... FOR UPDATE), so operations on one flight are
serialised while different flights proceed independently. seats_available is
always recounted from the Seat Ledger inside the same transaction that
changed the seats.
"""
import logging
from contextlib import asynccontextmanager
from typing import List, Optional, Tuple, Union

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from flight_booking.core.database import write_transaction
from flight_booking.core.exceptions import (
    FlightHasTicketsError,
    FlightNotFoundError,
    SeatAlreadyBookedError,
    SeatBookedError,
    SeatNotFoundError,
    StorageError,
    TicketNotFoundError,
)
from flight_booking.core.metrics import (
    flights_created_total,
    record_resize,
    seat_conflicts_total,
    ticket_purchase_duration_seconds,
    tickets_cancelled_total,
    tickets_purchased_total,
    track_time,
)
from flight_booking.models import Flight, Seat, Ticket
from flight_booking.schemas.flight import FlightCreate, FlightUpdate
from flight_booking.services.city_service import CityService
from flight_booking.services.seat_ledger import SeatLedger

logger = logging.getLogger(__name__)


class BookingService:
    """Runs the multi-step booking operations against one session"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.ledger = SeatLedger(session)
        self.cities = CityService(session)

    @asynccontextmanager
    async def _transaction(self):
        """Commit on normal exit, roll back on every exception"""
        try:
            async with write_transaction(self.session):
                yield
        except SQLAlchemyError as e:
            logger.exception("Booking transaction failed in storage layer")
            raise StorageError("Unexpected storage failure") from e

    # ==================== Tickets ====================

    @track_time(ticket_purchase_duration_seconds)
    async def purchase_ticket(
        self,
        passenger_name: str,
        passenger_surname: str,
        passenger_email: str,
        flight_id: int,
        seat_number: Union[int, str],
        booked_by: Optional[str] = None,
    ) -> Ticket:
        """
        Book one seat and issue a ticket for it.

        Raises:
            FlightNotFoundError: flight does not exist
            SeatNotFoundError: flight has no seat with this label
            SeatAlreadyBookedError: seat is taken
        """
        label = str(seat_number)

        async with self._transaction():
            # 1. Lock the flight; serialises bookings on this flight
            flight = await self._lock_flight(flight_id)

            # 2. Find the seat
            seat = await self.ledger.find_seat(flight_id, label, for_update=True)
            if seat is None:
                raise SeatNotFoundError(flight_id, label)

            # 3. Flip it; a lost race shows up as an unchanged row
            if seat.is_booked or not await self.ledger.mark_booked(seat.id):
                seat_conflicts_total.labels(operation='purchase').inc()
                raise SeatAlreadyBookedError(flight_id, label)

            # 4. Create the ticket
            ticket = Ticket(
                passenger_name=passenger_name,
                passenger_surname=passenger_surname,
                passenger_email=passenger_email,
                flight_id=flight_id,
                seat_id=seat.id,
                booked_by=booked_by,
            )
            self.session.add(ticket)
            await self.session.flush()

            # 5. Availability follows the ledger
            await self._sync_availability(flight)

            ticket = await self._load_ticket(ticket.id)

        tickets_purchased_total.inc()
        logger.info(
            f"Ticket {ticket.id} issued for seat {label} on flight {flight_id}",
            extra={'ticket_id': ticket.id, 'flight_id': flight_id, 'seat_number': label},
        )
        return ticket

    async def cancel_ticket(self, ticket_id: int, booked_by: Optional[str] = None) -> Ticket:
        """
        Delete a ticket and give its seat back.

        When booked_by is given, tickets bought by another account are
        treated as missing.

        Raises:
            TicketNotFoundError: no such ticket (nothing changes)
        """
        async with self._transaction():
            ticket = await self._load_ticket(ticket_id, booked_by)
            if ticket is None:
                raise TicketNotFoundError(ticket_id)

            flight = await self._lock_flight(ticket.flight_id)

            result = await self.session.execute(delete(Ticket).where(Ticket.id == ticket_id))
            if result.rowcount != 1:
                # Cancelled by a concurrent request while we waited for the lock
                raise TicketNotFoundError(ticket_id)

            await self.ledger.mark_free(ticket.seat_id)
            await self._sync_availability(flight)

        tickets_cancelled_total.inc()
        logger.info(
            f"Ticket {ticket_id} cancelled, seat {ticket.seat_number} on flight {ticket.flight_id} freed",
            extra={'ticket_id': ticket_id, 'flight_id': ticket.flight_id},
        )
        return ticket

    async def list_tickets(self, booked_by: Optional[str] = None) -> List[Ticket]:
        """All tickets, or only those bought by one account"""
        query = select(Ticket).options(selectinload(Ticket.seat)).order_by(Ticket.id)
        if booked_by is not None:
            query = query.where(Ticket.booked_by == booked_by)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_ticket(self, ticket_id: int, booked_by: Optional[str] = None) -> Optional[Ticket]:
        return await self._load_ticket(ticket_id, booked_by)

    # ==================== Flights ====================

    async def create_flight(self, data: FlightCreate) -> Flight:
        """Insert a flight and seed its seats 1..seats_total"""
        async with self._transaction():
            await self.cities.require_cities(data.from_city, data.to_city)

            flight = Flight(
                from_city=data.from_city,
                to_city=data.to_city,
                departure_time=data.departure_time,
                arrival_time=data.arrival_time,
                price=data.price,
                seats_total=data.seats_total,
                seats_available=0,
            )
            self.session.add(flight)
            await self.session.flush()

            await self.ledger.add_seats(flight.id, 1, data.seats_total)
            await self._sync_availability(flight)

            flight = await self._load_flight(flight.id)

        flights_created_total.inc()
        logger.info(f"Flight {flight.id} created with {flight.seats_total} seats",
                    extra={'flight_id': flight.id})
        return flight

    async def update_flight(self, flight_id: int, data: FlightUpdate) -> Flight:
        """
        Update a flight's details and reconcile its seat pool with seats_total.

        Raises:
            FlightNotFoundError: flight does not exist
            CityNotFoundError: unknown origin or destination
            SeatBookedError: shrinking would remove a booked seat; nothing is changed
        """
        async with self._transaction():
            flight, old_total = await self._update_flight_details(flight_id, data)
            await self._reconcile_seats(flight, old_total, data.seats_total)
            await self._sync_availability(flight)

            flight = await self._load_flight(flight_id)

        record_resize(old_total, data.seats_total)
        logger.info(
            f"Flight {flight_id} updated, seats {old_total} -> {flight.seats_total}, "
            f"available {flight.seats_available}",
            extra={'flight_id': flight_id},
        )
        return flight

    async def delete_flight(self, flight_id: int) -> None:
        """
        Raises:
            FlightNotFoundError: flight does not exist
            FlightHasTicketsError: tickets still reference the flight
        """
        async with self._transaction():
            await self._lock_flight(flight_id)

            count_query = select(func.count(Ticket.id)).where(Ticket.flight_id == flight_id)
            ticket_count = (await self.session.execute(count_query)).scalar_one()
            if ticket_count:
                raise FlightHasTicketsError(flight_id, ticket_count)

            await self.session.execute(delete(Seat).where(Seat.flight_id == flight_id))
            await self.session.execute(delete(Flight).where(Flight.id == flight_id))

        logger.info(f"Flight {flight_id} deleted", extra={'flight_id': flight_id})

    # ==================== Steps ====================

    async def _update_flight_details(self, flight_id: int, data: FlightUpdate) -> Tuple[Flight, int]:
        """Write the non-seat fields and the new seats_total; return the old total"""
        flight = await self._lock_flight(flight_id)
        old_total = flight.seats_total

        await self.cities.require_cities(data.from_city, data.to_city)

        flight.from_city = data.from_city
        flight.to_city = data.to_city
        flight.departure_time = data.departure_time
        flight.arrival_time = data.arrival_time
        flight.price = data.price
        flight.seats_total = data.seats_total
        await self.session.flush()

        return flight, old_total

    async def _reconcile_seats(self, flight: Flight, old_total: int, new_total: int) -> None:
        """Add or remove seat rows so labels run 1..new_total"""
        diff = new_total - old_total

        if diff > 0:
            await self.ledger.add_seats(flight.id, old_total + 1, new_total)
        elif diff < 0:
            for label in range(old_total, new_total, -1):
                try:
                    await self.ledger.remove_seat(flight.id, label)
                except SeatBookedError:
                    seat_conflicts_total.labels(operation='resize').inc()
                    logger.warning(
                        f"Resize of flight {flight.id} to {new_total} blocked by booked seat {label}",
                        extra={'flight_id': flight.id, 'seat_number': str(label)},
                    )
                    raise

    async def _sync_availability(self, flight: Flight) -> int:
        flight.seats_available = await self.ledger.count_free(flight.id)
        await self.session.flush()
        return flight.seats_available

    async def _lock_flight(self, flight_id: int) -> Flight:
        query = (
            select(Flight)
            .where(Flight.id == flight_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        flight = result.scalar_one_or_none()

        if not flight:
            raise FlightNotFoundError(flight_id)
        return flight

    async def _load_flight(self, flight_id: int) -> Flight:
        query = (
            select(Flight)
            .where(Flight.id == flight_id)
            .options(selectinload(Flight.seats))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return result.scalar_one()

    async def _load_ticket(self, ticket_id: int, booked_by: Optional[str] = None) -> Optional[Ticket]:
        query = (
            select(Ticket)
            .where(Ticket.id == ticket_id)
            .options(selectinload(Ticket.seat))
            .execution_options(populate_existing=True)
        )
        if booked_by is not None:
            query = query.where(Ticket.booked_by == booked_by)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

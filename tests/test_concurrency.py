"""
Concurrency test: two purchases of the same seat racing on separate sessions

Expected: exactly one ticket, the other caller gets SeatAlreadyBookedError
"""
import asyncio

import pytest
from sqlalchemy import func, select

from flight_booking.core.exceptions import SeatAlreadyBookedError
from flight_booking.models import Ticket
from flight_booking.services import BookingService, FlightService


async def attempt_booking(database, flight_id, seat_number, user_id):
    async with database.session() as session:
        return await BookingService(session).purchase_ticket(
            passenger_name=f"User{user_id}",
            passenger_surname="Racer",
            passenger_email=f"user{user_id}@example.com",
            flight_id=flight_id,
            seat_number=seat_number,
            booked_by=f"user{user_id}@example.com",
        )


@pytest.mark.asyncio
async def test_same_seat_sold_once(database, make_flight):
    flight = await make_flight(seats_total=3)

    results = await asyncio.gather(
        attempt_booking(database, flight.id, "1", 1),
        attempt_booking(database, flight.id, "1", 2),
        return_exceptions=True,
    )

    tickets = [r for r in results if isinstance(r, Ticket)]
    conflicts = [r for r in results if isinstance(r, SeatAlreadyBookedError)]
    assert len(tickets) == 1, results
    assert len(conflicts) == 1, results

    async with database.session() as session:
        count = (await session.execute(
            select(func.count(Ticket.id)).where(Ticket.flight_id == flight.id)
        )).scalar_one()
        flight = await FlightService(session).get_flight(flight.id)

    assert count == 1
    assert flight.seats_available == 2


@pytest.mark.asyncio
async def test_many_racers_one_winner(database, make_flight):
    flight = await make_flight(seats_total=2)

    results = await asyncio.gather(
        *(attempt_booking(database, flight.id, "2", user_id) for user_id in range(5)),
        return_exceptions=True,
    )

    tickets = [r for r in results if isinstance(r, Ticket)]
    assert len(tickets) == 1, results
    assert all(isinstance(r, (Ticket, SeatAlreadyBookedError)) for r in results), results


@pytest.mark.asyncio
async def test_different_seats_both_succeed(database, make_flight):
    flight = await make_flight(seats_total=3)

    results = await asyncio.gather(
        attempt_booking(database, flight.id, "1", 1),
        attempt_booking(database, flight.id, "3", 2),
    )

    assert sorted(t.seat_number for t in results) == ["1", "3"]

    async with database.session() as session:
        flight = await FlightService(session).get_flight(flight.id)
    assert flight.seats_available == 1


@pytest.mark.asyncio
async def test_open_read_does_not_block_purchase(database, make_flight):
    """A session holding a read transaction must not stall a booking"""
    flight = await make_flight(seats_total=2)

    async with database.session() as reader:
        await FlightService(reader).get_flight(flight.id)
        assert reader.in_transaction()

        ticket = await asyncio.wait_for(attempt_booking(database, flight.id, "1", 1), timeout=3)

        assert ticket.seat_number == "1"
        await reader.commit()

    async with database.session() as session:
        flight = await FlightService(session).get_flight(flight.id)
    assert flight.seats_available == 1

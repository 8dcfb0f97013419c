"""
Seat pool resize tests

Changing seats_total through update_flight adds or removes seats at the top
of the label range; a booked seat in the way aborts the whole update.
"""
import pytest

from flight_booking.core.exceptions import SeatBookedError
from flight_booking.schemas import FlightUpdate
from flight_booking.services import BookingService, FlightService


async def update(database, flight_id, data):
    async with database.session() as session:
        return await BookingService(session).update_flight(flight_id, data)


async def book(database, flight_id, seat_number):
    async with database.session() as session:
        return await BookingService(session).purchase_ticket(
            passenger_name="Grace",
            passenger_surname="Hopper",
            passenger_email="grace@example.com",
            flight_id=flight_id,
            seat_number=seat_number,
        )


async def reload(database, flight_id):
    async with database.session() as session:
        return await FlightService(session).get_flight(flight_id)


def labels(flight):
    return [seat.seat_number for seat in flight.seats]


class TestGrow:

    @pytest.mark.asyncio
    async def test_grow_adds_free_seats(self, database, make_flight, flight_fields):
        flight = await make_flight(seats_total=3)
        await book(database, flight.id, "1")

        grown = await update(database, flight.id, FlightUpdate(**flight_fields(5)))

        assert grown.seats_total == 5
        assert labels(grown) == ["1", "2", "3", "4", "5"]
        assert [s.is_booked for s in grown.seats] == [True, False, False, False, False]
        # old available (2) + added (2)
        assert grown.seats_available == 4

    @pytest.mark.asyncio
    async def test_grow_from_zero(self, database, make_flight, flight_fields):
        flight = await make_flight(seats_total=0)

        grown = await update(database, flight.id, FlightUpdate(**flight_fields(2)))

        assert labels(grown) == ["1", "2"]
        assert grown.seats_available == 2

    @pytest.mark.asyncio
    async def test_same_total_keeps_seats(self, database, make_flight, flight_fields):
        flight = await make_flight(seats_total=3)
        await book(database, flight.id, "3")

        same = await update(database, flight.id, FlightUpdate(**flight_fields(3)))

        assert labels(same) == ["1", "2", "3"]
        assert same.seats_available == 2


class TestShrink:

    @pytest.mark.asyncio
    async def test_shrink_removes_free_seats(self, database, make_flight, flight_fields):
        flight = await make_flight(seats_total=5)
        await book(database, flight.id, "2")

        shrunk = await update(database, flight.id, FlightUpdate(**flight_fields(2)))

        assert shrunk.seats_total == 2
        assert labels(shrunk) == ["1", "2"]
        assert shrunk.seats_available == 1

    @pytest.mark.asyncio
    async def test_shrink_to_zero(self, database, make_flight, flight_fields):
        flight = await make_flight(seats_total=3)

        shrunk = await update(database, flight.id, FlightUpdate(**flight_fields(0)))

        assert shrunk.seats == []
        assert shrunk.seats_available == 0
        assert shrunk.is_sold_out

    @pytest.mark.asyncio
    async def test_booked_seat_blocks_shrink_and_rolls_back(self, database, make_flight, flight_fields):
        flight = await make_flight(seats_total=4)
        await book(database, flight.id, "2")

        data = FlightUpdate(**flight_fields(1, price="10.00"))
        with pytest.raises(SeatBookedError) as exc_info:
            await update(database, flight.id, data)

        assert exc_info.value.label == "2"

        # Seats 4 and 3 were deleted before hitting 2; none of it may stick
        after = await reload(database, flight.id)
        assert after.seats_total == 4
        assert labels(after) == ["1", "2", "3", "4"]
        assert after.seats_available == 3
        assert str(after.price) == "149.90"

    @pytest.mark.asyncio
    async def test_booked_top_seat_blocks_shrink(self, database, make_flight, flight_fields):
        flight = await make_flight(seats_total=3)
        await book(database, flight.id, "3")

        with pytest.raises(SeatBookedError):
            await update(database, flight.id, FlightUpdate(**flight_fields(2)))

        after = await reload(database, flight.id)
        assert labels(after) == ["1", "2", "3"]
        assert after.seats_available == 2

"""
Seat Ledger tests
"""
import pytest

from flight_booking.core.exceptions import SeatBookedError
from flight_booking.services import SeatLedger


async def _labels(database, flight_id):
    async with database.session() as session:
        seats = await SeatLedger(session).seats_for(flight_id)
        return [seat.seat_number for seat in seats]


class TestAddSeats:

    @pytest.mark.asyncio
    async def test_add_seats_creates_free_sequential_labels(self, database, make_flight):
        flight = await make_flight(seats_total=0)

        async with database.session() as session:
            async with session.begin():
                seats = await SeatLedger(session).add_seats(flight.id, 1, 4)

        assert [seat.seat_number for seat in seats] == ["1", "2", "3", "4"]
        assert all(not seat.is_booked for seat in seats)
        assert await _labels(database, flight.id) == ["1", "2", "3", "4"]

    @pytest.mark.asyncio
    async def test_empty_range_adds_nothing(self, database, make_flight):
        flight = await make_flight(seats_total=2)

        async with database.session() as session:
            async with session.begin():
                seats = await SeatLedger(session).add_seats(flight.id, 3, 2)

        assert seats == []
        assert await _labels(database, flight.id) == ["1", "2"]

    @pytest.mark.asyncio
    async def test_seats_are_ordered_numerically(self, database, make_flight):
        flight = await make_flight(seats_total=12)

        labels = await _labels(database, flight.id)

        assert labels == [str(n) for n in range(1, 13)]


class TestBookingFlags:

    @pytest.mark.asyncio
    async def test_mark_booked_is_idempotent(self, database, make_flight):
        flight = await make_flight(seats_total=2)

        async with database.session() as session:
            async with session.begin():
                ledger = SeatLedger(session)
                seat = await ledger.find_seat(flight.id, "1")
                first = await ledger.mark_booked(seat.id)
                second = await ledger.mark_booked(seat.id)

        assert first is True
        assert second is False

    @pytest.mark.asyncio
    async def test_mark_free_on_free_seat_is_noop(self, database, make_flight):
        flight = await make_flight(seats_total=1)

        async with database.session() as session:
            async with session.begin():
                ledger = SeatLedger(session)
                seat = await ledger.find_seat(flight.id, 1)
                assert await ledger.mark_free(seat.id) is False
                assert await ledger.mark_booked(seat.id) is True
                assert await ledger.mark_free(seat.id) is True

    @pytest.mark.asyncio
    async def test_count_free(self, database, make_flight):
        flight = await make_flight(seats_total=3)

        async with database.session() as session:
            async with session.begin():
                ledger = SeatLedger(session)
                seat = await ledger.find_seat(flight.id, "2")
                await ledger.mark_booked(seat.id)
                free = await ledger.count_free(flight.id)

        assert free == 2

    @pytest.mark.asyncio
    async def test_find_seat_unknown_label(self, database, make_flight):
        flight = await make_flight(seats_total=3)

        async with database.session() as session:
            assert await SeatLedger(session).find_seat(flight.id, "4") is None


class TestRemoveSeat:

    @pytest.mark.asyncio
    async def test_remove_free_seat(self, database, make_flight):
        flight = await make_flight(seats_total=3)

        async with database.session() as session:
            async with session.begin():
                removed = await SeatLedger(session).remove_seat(flight.id, "3")

        assert removed is True
        assert await _labels(database, flight.id) == ["1", "2"]

    @pytest.mark.asyncio
    async def test_remove_missing_seat_returns_false(self, database, make_flight):
        flight = await make_flight(seats_total=3)

        async with database.session() as session:
            async with session.begin():
                removed = await SeatLedger(session).remove_seat(flight.id, "7")

        assert removed is False
        assert await _labels(database, flight.id) == ["1", "2", "3"]

    @pytest.mark.asyncio
    async def test_remove_booked_seat_raises(self, database, make_flight):
        flight = await make_flight(seats_total=3)

        async with database.session() as session:
            async with session.begin():
                ledger = SeatLedger(session)
                seat = await ledger.find_seat(flight.id, "2")
                await ledger.mark_booked(seat.id)

        async with database.session() as session:
            with pytest.raises(SeatBookedError) as exc_info:
                async with session.begin():
                    await SeatLedger(session).remove_seat(flight.id, "2")

        assert exc_info.value.label == "2"
        assert await _labels(database, flight.id) == ["1", "2", "3"]

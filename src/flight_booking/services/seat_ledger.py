"""
Seat Ledger - booked/free status of every seat belonging to a flight

The ledger only reads and writes seat rows. It never opens or commits a
transaction; callers (BookingService) run it inside their own unit of work.
"""
import logging
from typing import List, Optional, Union

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from flight_booking.core.exceptions import SeatBookedError
from flight_booking.models import Seat

logger = logging.getLogger(__name__)

SeatLabel = Union[int, str]


class SeatLedger:
    """Seat rows of flights and their booked/free status"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def seats_for(self, flight_id: int) -> List[Seat]:
        """All seats of a flight in label order"""
        query = (
            select(Seat)
            .where(Seat.flight_id == flight_id)
            .order_by(*Seat.label_order())
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def find_seat(
        self,
        flight_id: int,
        label: SeatLabel,
        for_update: bool = False,
    ) -> Optional[Seat]:
        query = select(Seat).where(
            Seat.flight_id == flight_id,
            Seat.seat_number == str(label),
        )
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def mark_booked(self, seat_id: int) -> bool:
        """
        Flip a free seat to booked.

        Returns False when the seat was already booked, so a second call is a
        no-op and a caller that lost a race can tell.
        """
        return await self._set_booked(seat_id, booked=True)

    async def mark_free(self, seat_id: int) -> bool:
        """Flip a booked seat back to free; False if it was already free"""
        return await self._set_booked(seat_id, booked=False)

    async def _set_booked(self, seat_id: int, booked: bool) -> bool:
        stmt = (
            update(Seat)
            .where(Seat.id == seat_id, Seat.is_booked == (not booked))
            .values(is_booked=booked)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def add_seats(self, flight_id: int, from_label: int, to_label: int) -> List[Seat]:
        """Insert free seats labelled from_label..to_label inclusive"""
        seats = [
            Seat(flight_id=flight_id, seat_number=str(number), is_booked=False)
            for number in range(from_label, to_label + 1)
        ]
        if not seats:
            return seats

        self.session.add_all(seats)
        await self.session.flush()
        logger.debug(f"Added seats {from_label}..{to_label} to flight {flight_id}")
        return seats

    async def remove_seat(self, flight_id: int, label: SeatLabel) -> bool:
        """
        Delete a free seat.

        Raises SeatBookedError if the seat is booked. Returns False if the
        flight has no seat with this label.
        """
        seat = await self.find_seat(flight_id, label, for_update=True)
        if seat is None:
            return False
        if seat.is_booked:
            raise SeatBookedError(flight_id, seat.seat_number)

        await self.session.execute(delete(Seat).where(Seat.id == seat.id))
        return True

    async def count_free(self, flight_id: int) -> int:
        query = select(func.count(Seat.id)).where(
            Seat.flight_id == flight_id,
            Seat.is_booked == False,
        )
        result = await self.session.execute(query)
        return result.scalar_one()

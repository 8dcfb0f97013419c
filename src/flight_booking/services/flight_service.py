"""
Flight Service - read-side queries for flights and their seats
"""
import logging
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from flight_booking.core.exceptions import FlightNotFoundError
from flight_booking.models import Flight

logger = logging.getLogger(__name__)


class FlightService:
    """Service for flight-related queries"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _base_query(self):
        return select(Flight).options(selectinload(Flight.seats))

    async def list_flights(self) -> List[Flight]:
        """All flights ordered by departure, each with its seats"""
        query = self._base_query().order_by(Flight.departure_time.asc(), Flight.id.asc())
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def filter_flights(
        self,
        origin: Optional[int] = None,
        destination: Optional[int] = None,
        departure_date: Optional[date] = None,
    ) -> List[Flight]:
        """Filter flights by optional origin, destination and departure day"""
        query = self._base_query()

        if origin is not None:
            query = query.where(Flight.from_city == origin)
        if destination is not None:
            query = query.where(Flight.to_city == destination)
        if departure_date is not None:
            day_start = datetime.combine(departure_date, time.min)
            query = query.where(
                Flight.departure_time >= day_start,
                Flight.departure_time < day_start + timedelta(days=1),
            )

        query = query.order_by(Flight.departure_time.asc(), Flight.id.asc())
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_flight(self, flight_id: int) -> Flight:
        query = self._base_query().where(Flight.id == flight_id)
        result = await self.session.execute(query)
        flight = result.scalar_one_or_none()

        if not flight:
            raise FlightNotFoundError(flight_id)
        return flight

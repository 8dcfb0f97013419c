"""
City directory - read-only lookup of city ids
"""
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from flight_booking.core.exceptions import CityNotFoundError
from flight_booking.models import City

logger = logging.getLogger(__name__)


class CityService:
    """Service for city lookups"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_cities(self) -> List[City]:
        result = await self.session.execute(select(City).order_by(City.name))
        return list(result.scalars().all())

    async def get_city(self, city_id: int) -> Optional[City]:
        return await self.session.get(City, city_id)

    async def require_cities(self, *city_ids: int) -> None:
        """Raise CityNotFoundError for the first id that is not in the directory"""
        wanted = set(city_ids)
        result = await self.session.execute(select(City.id).where(City.id.in_(wanted)))
        found = set(result.scalars().all())
        for city_id in city_ids:
            if city_id not in found:
                raise CityNotFoundError(city_id)

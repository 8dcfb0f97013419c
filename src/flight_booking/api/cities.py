"""Cities API endpoints - read-only directory"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from flight_booking.api.deps import get_current_user, get_db
from flight_booking.core.exceptions import CityNotFoundError
from flight_booking.schemas import CityResponse
from flight_booking.services import CityService

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/cities/all", response_model=List[CityResponse])
async def list_cities(db: AsyncSession = Depends(get_db)):
    """All cities ordered by name"""
    cities = await CityService(db).list_cities()
    return [CityResponse.model_validate(city) for city in cities]


@router.get("/cities/{city_id}", response_model=CityResponse)
async def get_city(city_id: int, db: AsyncSession = Depends(get_db)):
    city = await CityService(db).get_city(city_id)
    if not city:
        raise CityNotFoundError(city_id)
    return CityResponse.model_validate(city)

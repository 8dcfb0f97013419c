"""
Flights API endpoints
Reads are open to any signed-in user; writes require an admin token
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from flight_booking.api.deps import get_current_user, get_db, require_admin
from flight_booking.schemas import FlightCreate, FlightResponse, FlightUpdate
from flight_booking.services import BookingService, FlightService

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/flights", response_model=List[FlightResponse])
async def list_flights(db: AsyncSession = Depends(get_db)):
    """List all flights, each with its seats"""
    flights = await FlightService(db).list_flights()
    return [FlightResponse.model_validate(flight) for flight in flights]


@router.get("/flights/filter", response_model=List[FlightResponse])
async def filter_flights(
    origin: Optional[int] = Query(None, description="Origin city id"),
    destination: Optional[int] = Query(None, description="Destination city id"),
    departure_date: Optional[date] = Query(None, alias="date", description="Departure day, YYYY-MM-DD"),
    db: AsyncSession = Depends(get_db),
):
    """
    Filter flights

    - **origin**: origin city id (optional)
    - **destination**: destination city id (optional)
    - **date**: departure day (optional)
    """
    flights = await FlightService(db).filter_flights(
        origin=origin,
        destination=destination,
        departure_date=departure_date,
    )
    return [FlightResponse.model_validate(flight) for flight in flights]


@router.get("/flights/{flight_id}", response_model=FlightResponse)
async def get_flight(flight_id: int, db: AsyncSession = Depends(get_db)):
    flight = await FlightService(db).get_flight(flight_id)
    return FlightResponse.model_validate(flight)


@router.post(
    "/flights",
    response_model=FlightResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
async def create_flight(payload: FlightCreate, db: AsyncSession = Depends(get_db)):
    """Create a flight and seed seats 1..seats_total"""
    flight = await BookingService(db).create_flight(payload)
    return FlightResponse.model_validate(flight)


@router.put(
    "/flights/{flight_id}",
    response_model=FlightResponse,
    dependencies=[Depends(require_admin)],
)
async def update_flight(flight_id: int, payload: FlightUpdate, db: AsyncSession = Depends(get_db)):
    """
    Update a flight

    Changing seats_total adds or removes seats; removing a booked seat fails
    with 409 and leaves the flight untouched.
    """
    flight = await BookingService(db).update_flight(flight_id, payload)
    return FlightResponse.model_validate(flight)


@router.delete("/flights/{flight_id}", status_code=204, dependencies=[Depends(require_admin)])
async def delete_flight(flight_id: int, db: AsyncSession = Depends(get_db)):
    await BookingService(db).delete_flight(flight_id)
    return Response(status_code=204)

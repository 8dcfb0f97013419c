"""Tickets API endpoints"""
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from flight_booking.api.deps import get_current_user, get_db, get_notifier
from flight_booking.core.exceptions import TicketNotFoundError
from flight_booking.middleware.rate_limiter import limiter
from flight_booking.schemas import CurrentUser, TicketCreate, TicketResponse
from flight_booking.services import BookingService, notify_ticket_purchased

router = APIRouter()


def _owner_filter(user: CurrentUser):
    """Admins see every ticket, everybody else only the ones they bought"""
    return None if user.is_admin else user.email


@router.post("/tickets", response_model=TicketResponse, status_code=201)
@limiter.limit("30/minute")
async def purchase_ticket(
    request: Request,
    payload: TicketCreate,
    background_tasks: BackgroundTasks,
    user: CurrentUser = Depends(get_current_user),
    notifier=Depends(get_notifier),
    db: AsyncSession = Depends(get_db),
):
    """
    Buy a ticket for one seat

    - 201 with the ticket (including seat_number)
    - 404 unknown flight or seat
    - 409 seat already booked
    """
    ticket = await BookingService(db).purchase_ticket(
        passenger_name=payload.passenger_name,
        passenger_surname=payload.passenger_surname,
        passenger_email=payload.passenger_email,
        flight_id=payload.flight_id,
        seat_number=payload.seat_number,
        booked_by=user.email,
    )
    response = TicketResponse.from_ticket(ticket)

    background_tasks.add_task(notify_ticket_purchased, notifier, response.model_dump(mode="json"))
    return response


@router.get("/tickets", response_model=List[TicketResponse])
async def list_tickets(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    tickets = await BookingService(db).list_tickets(booked_by=_owner_filter(user))
    return [TicketResponse.from_ticket(ticket) for ticket in tickets]


@router.get("/tickets/{ticket_id}", response_model=TicketResponse)
async def get_ticket(
    ticket_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    ticket = await BookingService(db).get_ticket(ticket_id, booked_by=_owner_filter(user))
    if not ticket:
        raise TicketNotFoundError(ticket_id)
    return TicketResponse.from_ticket(ticket)


@router.delete("/tickets/{ticket_id}", status_code=204)
async def cancel_ticket(
    ticket_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a ticket, freeing its seat"""
    await BookingService(db).cancel_ticket(ticket_id, booked_by=_owner_filter(user))
    return Response(status_code=204)

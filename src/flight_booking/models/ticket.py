"""
Ticket model - a passenger's claim on exactly one seat
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from flight_booking.core.database import Base


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True)
    passenger_name = Column(String(255), nullable=False)
    passenger_surname = Column(String(255), nullable=False)
    passenger_email = Column(String(255), nullable=False, index=True)
    flight_id = Column(Integer, ForeignKey("flights.id"), nullable=False, index=True)
    seat_id = Column(Integer, ForeignKey("seats.id", ondelete="RESTRICT"), nullable=False, unique=True)
    booked_by = Column(String(255), nullable=True, index=True)  # Purchaser's account email
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    flight = relationship("Flight", back_populates="tickets")
    seat = relationship("Seat", back_populates="ticket")

    def __repr__(self):
        return (f"<Ticket(id={self.id}, flight_id={self.flight_id}, seat_id={self.seat_id}, "
                f"passenger='{self.passenger_name} {self.passenger_surname}')>")

    @property
    def seat_number(self) -> str:
        return self.seat.seat_number

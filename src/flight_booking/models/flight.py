"""
Flight model - owns its seat pool and the cached availability counter
"""
from datetime import datetime
from sqlalchemy import Column, Integer, DateTime, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from flight_booking.core.database import Base


def _seat_order():
    from flight_booking.models.seat import Seat
    return Seat.label_order()


class Flight(Base):
    __tablename__ = "flights"
    __table_args__ = (
        CheckConstraint('seats_total >= 0', name='ck_flight_seats_total'),
        CheckConstraint('seats_available >= 0', name='ck_flight_seats_available'),
    )

    id = Column(Integer, primary_key=True, index=True)
    from_city = Column(Integer, ForeignKey("cities.id"), nullable=False, index=True)
    to_city = Column(Integer, ForeignKey("cities.id"), nullable=False, index=True)
    departure_time = Column(DateTime, nullable=False, index=True)
    arrival_time = Column(DateTime, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    seats_total = Column(Integer, nullable=False, default=0)
    seats_available = Column(Integer, nullable=False, default=0)  # Derived: count of free seats
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    seats = relationship("Seat", back_populates="flight", cascade="all, delete-orphan",
                         passive_deletes=True, order_by=_seat_order)
    tickets = relationship("Ticket", back_populates="flight")

    def __repr__(self):
        return (f"<Flight(id={self.id}, from={self.from_city}, to={self.to_city}, "
                f"departure='{self.departure_time}', seats={self.seats_available}/{self.seats_total})>")

    @property
    def is_sold_out(self) -> bool:
        return self.seats_available <= 0

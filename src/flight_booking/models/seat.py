"""
Seat model - CRITICAL for concurrency control
One row per seat of a flight; is_booked is the single source of truth for availability
"""
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship

from flight_booking.core.database import Base


class Seat(Base):
    __tablename__ = "seats"
    __table_args__ = (
        UniqueConstraint('flight_id', 'seat_number', name='uq_flight_seat_number'),
    )

    id = Column(Integer, primary_key=True, index=True)
    flight_id = Column(Integer, ForeignKey("flights.id", ondelete="CASCADE"), nullable=False, index=True)
    seat_number = Column(String(10), nullable=False)  # '1', '2', ... 'N'
    is_booked = Column(Boolean, nullable=False, default=False, index=True)

    # Relationships
    flight = relationship("Flight", back_populates="seats")
    ticket = relationship("Ticket", back_populates="seat", uselist=False)

    def __repr__(self):
        return (f"<Seat(id={self.id}, flight_id={self.flight_id}, "
                f"seat='{self.seat_number}', booked={self.is_booked})>")

    @property
    def is_available(self) -> bool:
        return not self.is_booked

    @classmethod
    def label_order(cls):
        """Numeric ordering for the sequential string labels ('2' before '10')"""
        return [func.length(cls.seat_number), cls.seat_number]

"""
City model - read-only directory of airports' cities
"""
from sqlalchemy import Column, Integer, String

from flight_booking.core.database import Base


class City(Base):
    __tablename__ = "cities"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)

    def __repr__(self):
        return f"<City(id={self.id}, name='{self.name}')>"

"""
User model - login accounts; is_admin gates flight management
"""
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime

from flight_booking.core.database import Base


class User(Base):
    __tablename__ = "users"

    email = Column(String(255), primary_key=True)
    password_hash = Column(String(255), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<User(email='{self.email}', admin={self.is_admin})>"

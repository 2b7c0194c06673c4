"""
Data models for the booking service.

"""
from sqlalchemy import Column, Date, Integer, String

from database import Base


class Booking(Base):
    """
    One reservation, owned by the user who created it.

    - id: server-generated; insertion order is id order.
    - seat_type: what is booked. Stored in the "title" column.
    - date, start_time, end_time: the slot. Times are "HH:MM" or "HH:MM:SS"
      strings, validated at the API boundary.
    - phone_number, email: contact details.
    - user_id: owner. Every single-row query filters on it.
    """
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    seat_type = Column("title", String(255), nullable=False)
    date = Column(Date, nullable=False)
    start_time = Column(String(8), nullable=False)
    end_time = Column(String(8), nullable=False)
    phone_number = Column(String(32), nullable=False)
    email = Column(String(255), nullable=False)
    user_id = Column(String(255), nullable=False, index=True)

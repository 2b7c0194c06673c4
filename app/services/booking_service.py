"""
Booking service: data access for the bookings table.

Business logic separated from the HTTP layer. Every single-row operation
filters on both booking id and owner, so a caller can never read, change or
delete another user's booking; a miss returns None and the router turns it
into a 404. SQLAlchemy errors propagate to the app-level handler.
"""
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from models import Booking
from schemas import BookingFields

logger = logging.getLogger(__name__)


def _owned(db: Session, user_id: str, booking_id: int) -> Booking | None:
    stmt = select(Booking).where(Booking.id == booking_id, Booking.user_id == user_id)
    return db.scalars(stmt).first()


def list_bookings(db: Session, user_id: str) -> list[Booking]:
    """All bookings owned by user_id, oldest first. Empty list if none."""
    stmt = select(Booking).where(Booking.user_id == user_id).order_by(Booking.id)
    return list(db.scalars(stmt))


def get_booking(db: Session, user_id: str, booking_id: int) -> Booking | None:
    return _owned(db, user_id, booking_id)


def create_booking(db: Session, fields: BookingFields) -> Booking:
    """Insert a booking for fields.user_id. No idempotency: retries duplicate."""
    booking = Booking(**fields.model_dump())
    db.add(booking)
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s created for user %s", booking.id, booking.user_id)
    return booking


def update_booking(db: Session, booking_id: int, fields: BookingFields) -> Booking | None:
    """
    Replace every mutable field of the booking, but only if it belongs to
    fields.user_id. The owner itself never changes. Last writer wins.
    """
    booking = _owned(db, fields.user_id, booking_id)
    if booking is None:
        return None
    for name, value in fields.model_dump(exclude={"user_id"}).items():
        setattr(booking, name, value)
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s updated by user %s", booking.id, booking.user_id)
    return booking


def delete_booking(db: Session, booking_id: int, user_id: str) -> Booking | None:
    """Delete the booking if user_id owns it; returns the deleted row."""
    booking = _owned(db, user_id, booking_id)
    if booking is None:
        return None
    db.delete(booking)
    db.commit()
    logger.info("Booking %s deleted by user %s", booking_id, user_id)
    return booking

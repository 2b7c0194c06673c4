"""
Bookings router: list, get, create, update, delete.

Delegates data access to services.booking_service. Bodies are validated by
the schemas module before anything touches the database. Misses are 404;
database faults become a generic 500 in main's exception handler.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from schemas import BookingFields, BookingOut, DeleteBookingBody, DeletedBooking
from services import booking_service

router = APIRouter(prefix="/booking", tags=["bookings"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="Booking not found")


@router.get("/{user_id}", response_model=list[BookingOut])
def list_bookings(user_id: str, db: Session = Depends(get_db)):
    """Every booking the user owns, in creation order."""
    return booking_service.list_bookings(db, user_id)


@router.get("/{user_id}/{booking_id}", response_model=BookingOut)
def get_booking(user_id: str, booking_id: int, db: Session = Depends(get_db)):
    booking = booking_service.get_booking(db, user_id, booking_id)
    if booking is None:
        raise _not_found()
    return booking


@router.post("", response_model=BookingOut, status_code=201)
def create_booking(body: BookingFields, db: Session = Depends(get_db)):
    return booking_service.create_booking(db, body)


@router.put("/{booking_id}", response_model=BookingOut)
def update_booking(booking_id: int, body: BookingFields, db: Session = Depends(get_db)):
    """
    Full replace of the booking's fields. 404 unless body.userId owns
    booking_id.
    """
    booking = booking_service.update_booking(db, booking_id, body)
    if booking is None:
        raise _not_found()
    return booking


@router.delete("/{booking_id}", response_model=DeletedBooking)
def delete_booking(booking_id: int, body: DeleteBookingBody, db: Session = Depends(get_db)):
    """Delete the booking if body.userId owns it; echoes the deleted row."""
    booking = booking_service.delete_booking(db, booking_id, body.user_id)
    if booking is None:
        raise _not_found()
    return DeletedBooking(
        booking=BookingOut.model_validate(booking),
        message="Booking deleted successfully",
    )

"""
Request and response bodies for the booking API.

Wire names are camelCase (seatType, startTime, ...); Python attributes are
snake_case and match the Booking columns, so BookingOut validates straight
from an ORM row.
"""
import datetime as dt

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from pydantic.alias_generators import to_camel

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookingFields(CamelModel):
    """Mutable booking fields plus the owner they are submitted for."""
    seat_type: str = Field(..., min_length=1, max_length=255)
    date: dt.date
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    phone_number: str = Field(..., min_length=1, max_length=32)
    email: EmailStr
    user_id: str = Field(..., min_length=1, max_length=255)

    @model_validator(mode="after")
    def end_after_start(self):
        if dt.time.fromisoformat(self.end_time) <= dt.time.fromisoformat(self.start_time):
            raise ValueError("endTime must be after startTime")
        return self


class BookingOut(BookingFields):
    model_config = ConfigDict(from_attributes=True)

    id: int


class DeleteBookingBody(CamelModel):
    user_id: str = Field(..., min_length=1, max_length=255)


class DeletedBooking(BaseModel):
    booking: BookingOut
    message: str

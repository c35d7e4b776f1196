from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, model_validator
from hotel_core.models.bookings import BookingStatus
from hotel_core.models.rooms import RoomCategory
from hotel_core.utils.constants import MAX_STAY


class StayDates(BaseModel):
    check_in: date
    check_out: date

    @model_validator(mode="after")
    def validate_range(self):
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        if (self.check_out - self.check_in).days > MAX_STAY:
            raise ValueError(f"Maximum stay is {MAX_STAY} nights")
        return self


class RoomTypeStayRequest(StayDates):
    room_type_id: str = Field(min_length=1)


class SearchRoomsRequest(StayDates):
    guests: int = Field(gt=0)
    room_type: Optional[RoomCategory] = None


class CreateBookingRequest(StayDates):
    room_type_id: str = Field(min_length=1)
    guests: int = Field(gt=0)
    special_requests: Optional[str] = None
    promo_code: Optional[str] = None


class UpdateBookingRequest(BaseModel):
    room_id: Optional[str] = None
    status: Optional[BookingStatus] = None
    special_requests: Optional[str] = None

    def provided(self) -> dict:
        """Only the fields the caller actually sent."""
        return {name: getattr(self, name) for name in self.model_fields_set}

from pydantic import BaseModel, Field, field_validator
from typing import Optional

from carpool.models.booking import BookingStatus


class BookingCreateRequest(BaseModel):
    tripId:      int
    seatsBooked: int = Field(ge=1, le=8)


class BookingStatusRequest(BaseModel):
    status: BookingStatus

    @field_validator("status")
    @classmethod
    def check_decision(cls, v):
        if not BookingStatus.PENDING.can_transition_to(v):
            raise ValueError("status must be 'confirmed' or 'cancelled'")
        return v


class RatePassengerRequest(BaseModel):
    rating:  int = Field(ge=1, le=5)
    comment: Optional[str] = None

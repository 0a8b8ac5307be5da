from datetime import date, time
from pydantic import BaseModel, Field, field_validator
from typing import Optional


class TripCreateRequest(BaseModel):
    fromCity:       str
    toCity:         str
    tripDate:       date
    tripTime:       time
    price:          int = Field(ge=0)
    seats:          int = Field(ge=1, le=8)
    description:    Optional[str] = None
    duration:       Optional[str] = None
    noSmoking:      bool = False
    animalsAllowed: bool = False
    musicAllowed:   bool = False

    @field_validator("fromCity", "toCity")
    @classmethod
    def check_city(cls, v):
        if not v.strip(): raise ValueError("City cannot be empty")
        return v.strip()

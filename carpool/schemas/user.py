from pydantic import BaseModel, field_validator
from typing import Optional


class ProfileUpdateRequest(BaseModel):
    fullName:  Optional[str] = None
    phone:     Optional[str] = None
    carBrand:  Optional[str] = None
    carModel:  Optional[str] = None
    carYear:   Optional[int] = None
    carColor:  Optional[str] = None
    carNumber: Optional[str] = None

    @field_validator("fullName", "phone")
    @classmethod
    def check_not_empty(cls, v):
        if v is not None and not v.strip(): raise ValueError("Field cannot be empty")
        return v.strip() if v else v

    @field_validator("carYear")
    @classmethod
    def check_year(cls, v):
        if v is not None and not (1950 <= v <= 2100): raise ValueError("carYear is out of range")
        return v

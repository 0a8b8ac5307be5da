from pydantic import BaseModel, Field, field_validator
from typing import Optional


class ReviewCreateRequest(BaseModel):
    tripId:   int
    targetId: int
    rating:   int = Field(ge=1, le=5)
    comment:  Optional[str] = None

    @field_validator("comment")
    @classmethod
    def strip_comment(cls, v):
        return v.strip() if v else v


class ReviewUpdateRequest(BaseModel):
    rating:  int = Field(ge=1, le=5)
    comment: Optional[str] = None

    @field_validator("comment")
    @classmethod
    def strip_comment(cls, v):
        return v.strip() if v else v

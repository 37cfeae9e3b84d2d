
from typing import Annotated, Optional, List
from pydantic import BaseModel, Field, UUID4, field_validator
from decimal import Decimal
from datetime import datetime

from app.schemas.show import ShowSummary


# Booking: Create (POST /shows/{id}/bookings)
class BookingCreate(BaseModel):
    seat_numbers: Annotated[List[int], Field(min_length=1)]

    @field_validator("seat_numbers")
    @classmethod
    def no_duplicates(cls, v: List[int]) -> List[int]:
        if len(set(v)) != len(v):
            raise ValueError("seat_numbers must not contain duplicates")
        return v


# Booking: Full response
class Booking(BaseModel):
    id: UUID4
    user_id: UUID4
    show_id: UUID4
    seat_numbers: List[int]
    seat_labels: List[str] = []
    status: str
    total_amount: Decimal
    created_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    show: Optional[ShowSummary] = None

    class Config:
        from_attributes = True

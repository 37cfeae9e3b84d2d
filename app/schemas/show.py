
from typing import Optional
from pydantic import BaseModel, Field, UUID4, field_validator
from decimal import Decimal
from datetime import datetime, timezone


class ShowBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = ""
    date: datetime
    venue: str = Field(min_length=1, max_length=200)
    total_seats: int = Field(gt=0)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)


# Show: Create (POST /admin/shows)
class ShowCreate(ShowBase):
    @field_validator("date")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        # Naive input is taken as UTC; stored values are always UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class Show(ShowBase):
    id: UUID4
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Admin listing row (GET /admin/shows)
class AdminShow(Show):
    booked_count: int = 0


# Compact show for nested responses (booking list)
class ShowSummary(BaseModel):
    id: UUID4
    name: str
    date: datetime
    venue: str

    class Config:
        from_attributes = True

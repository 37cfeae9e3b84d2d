
from typing import List
from pydantic import BaseModel

from app.schemas.show import Show


# --- Seat Map (seat selection screen) ---

class SeatStatus(BaseModel):
    number: int
    label: str
    status: str  # available, booked


class SeatRow(BaseModel):
    label: str
    seats: List[SeatStatus]


class SeatMapResponse(BaseModel):
    show: Show
    booked_seats: List[int]
    available_count: int
    rows: List[SeatRow]


from typing import List
from pydantic import BaseModel


# Error responses
class ErrorResponse(BaseModel):
    error: str
    message: str


class SeatsUnavailableError(ErrorResponse):
    conflicting_seats: List[int]
    remaining_selection: List[int]
    booked_seats: List[int]


class Message(BaseModel):
    message: str

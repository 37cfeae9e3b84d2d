"""Error kinds raised by the services and their HTTP rendering."""

import logging
from typing import Iterable, List

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.schemas.common import ErrorResponse, SeatsUnavailableError

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 400
    error = "bad_request"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=self.error, message=self.message)


class NotFound(AppError):
    status_code = 404
    error = "not_found"


class InvalidCredentials(AppError):
    status_code = 401
    error = "invalid_credentials"

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class EmailAlreadyExists(AppError):
    status_code = 400
    error = "email_already_exists"

    def __init__(self, message: str = "Email already exists"):
        super().__init__(message)


class InvalidSeat(AppError):
    error = "invalid_seat"


class InvalidTransition(AppError):
    status_code = 409
    error = "invalid_transition"


class StoreFailure(AppError):
    status_code = 503
    error = "store_failure"


class SeatsTaken(Exception):
    """The store refused a seat claim because another booking holds the seat."""


class SeatConflict(AppError):
    status_code = 409
    error = "seats_unavailable"

    def __init__(
        self,
        conflicting: Iterable[int],
        remaining: Iterable[int],
        booked: Iterable[int],
    ):
        self.conflicting: List[int] = sorted(conflicting)
        self.remaining: List[int] = sorted(remaining)
        self.booked: List[int] = sorted(booked)
        super().__init__("Some seats were just booked. Please select different seats.")

    def to_response(self) -> SeatsUnavailableError:
        return SeatsUnavailableError(
            error=self.error,
            message=self.message,
            conflicting_seats=self.conflicting,
            remaining_selection=self.remaining,
            booked_seats=self.booked,
        )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
    else:
        logger.warning("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_response().model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)

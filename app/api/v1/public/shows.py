import logging
from uuid import UUID
from typing import List, Literal

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_current_user, get_store
from app.core.exceptions import StoreFailure
from app.models.user import User
from app.schemas.booking import Booking as BookingSchema, BookingCreate
from app.schemas.seat import SeatMapResponse, SeatRow, SeatStatus
from app.schemas.show import Show as ShowSchema
from app.services.booking_flow import BookingFlow
from app.services.store import ShowStore
from app.api.v1.public.bookings import serialize_booking
from app.utils.seating import seat_grid, seat_label

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shows", tags=["Shows"])


@router.get("/", response_model=List[ShowSchema])
def list_shows(
    scope: Literal["upcoming", "all"] = Query("upcoming", description="upcoming: not yet started"),
    store: ShowStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    """Shows ordered by date, soonest first. A failed read yields an empty list."""
    try:
        return store.list_shows(upcoming=scope == "upcoming")
    except StoreFailure:
        logger.exception("Listing shows failed")
        return []


@router.get("/{show_id}", response_model=ShowSchema)
def get_show(
    show_id: UUID,
    store: ShowStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return store.get_show(show_id)


@router.get("/{show_id}/seat-map", response_model=SeatMapResponse)
def get_seat_map(
    show_id: UUID,
    store: ShowStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    """
    Seat grid for a show, ten seats per row with rows lettered from A.
    A seat is booked while any pending or confirmed booking holds it.
    """
    flow = BookingFlow(store, current_user.id).load(show_id)

    rows = [
        SeatRow(
            label=row_label,
            seats=[
                SeatStatus(
                    number=n,
                    label=seat_label(n),
                    status="booked" if n in flow.booked else "available",
                )
                for n in numbers
            ],
        )
        for row_label, numbers in seat_grid(flow.show.total_seats)
    ]

    return SeatMapResponse(
        show=ShowSchema.model_validate(flow.show),
        booked_seats=sorted(flow.booked),
        available_count=flow.show.total_seats - len(flow.booked),
        rows=rows,
    )


@router.post(
    "/{show_id}/bookings",
    response_model=BookingSchema,
    status_code=status.HTTP_201_CREATED,
)
def create_booking(
    show_id: UUID,
    data: BookingCreate,
    store: ShowStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    """
    Book the selected seats as a pending booking.

    - 409 when any seat was booked by someone else; the body lists the
      conflicting seats and the part of the selection that is still free.
    - 503 when the store could not record the booking; retry as-is.
    """
    flow = BookingFlow(store, current_user.id).load(show_id)
    flow.select_seats(data.seat_numbers)
    booking = flow.submit()
    return serialize_booking(booking)

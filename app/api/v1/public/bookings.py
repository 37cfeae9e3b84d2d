import logging
from uuid import UUID
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_current_user, get_store
from app.core.exceptions import StoreFailure
from app.models.booking import Booking
from app.models.user import User
from app.schemas.booking import Booking as BookingSchema
from app.schemas.show import ShowSummary
from app.services.booking_flow import cancel_booking, confirm_booking
from app.services.store import ShowStore
from app.utils.seating import format_seats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def serialize_booking(booking: Booking) -> BookingSchema:
    """Convert a Booking ORM object to its schema representation."""
    return BookingSchema(
        id=booking.id,
        user_id=booking.user_id,
        show_id=booking.show_id,
        seat_numbers=booking.seat_numbers,
        seat_labels=format_seats(booking.seat_numbers),
        status=booking.status,
        total_amount=booking.total_amount,
        created_at=booking.created_at,
        cancelled_at=booking.cancelled_at,
        show=ShowSummary.model_validate(booking.show) if booking.show else None,
    )


@router.get("/", response_model=List[BookingSchema])
def list_my_bookings(
    status: Optional[Literal["pending", "confirmed", "cancelled"]] = Query(None),
    store: ShowStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    """Return the authenticated user's bookings, newest first."""
    try:
        bookings = store.list_user_bookings(current_user.id, status)
    except StoreFailure:
        logger.exception("Listing bookings for user %s failed", current_user.id)
        return []
    return [serialize_booking(b) for b in bookings]


@router.get("/{booking_id}", response_model=BookingSchema)
def get_booking(
    booking_id: UUID,
    store: ShowStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    """Return a single booking. Only the owning user can access it."""
    return serialize_booking(store.get_booking(booking_id, current_user.id))


@router.patch("/{booking_id}/confirm", response_model=BookingSchema)
def confirm(
    booking_id: UUID,
    store: ShowStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return serialize_booking(confirm_booking(store, booking_id, current_user.id))


@router.patch("/{booking_id}/cancel", response_model=BookingSchema)
def cancel(
    booking_id: UUID,
    store: ShowStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    """Cancel a pending or confirmed booking and free its seats. Cancelling twice is a no-op."""
    return serialize_booking(cancel_booking(store, booking_id, current_user.id))

"""Seat selection and booking submission for a single show.

A ``BookingFlow`` carries the state of one user's booking session: the show,
the seats known to be booked by others, and the user's tentative selection.
Nothing is written to the store until ``submit``.

``submit`` re-reads the booked set right before inserting, which shrinks but
does not close the window in which two users can pick the same seat. The
store closes it: seat claims are unique per (show, seat), so the losing insert
fails and is reported exactly like a conflict found by the re-read.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional, Set
from uuid import UUID

from app.core.exceptions import (
    InvalidSeat,
    InvalidTransition,
    SeatConflict,
    SeatsTaken,
    StoreFailure,
)
from app.models.booking import Booking
from app.models.show import Show
from app.services.store import ShowStore
from app.utils.seating import format_seats

logger = logging.getLogger(__name__)


class BookingFlow:
    def __init__(self, store: ShowStore, user_id: UUID):
        self.store = store
        self.user_id = user_id
        self.show: Optional[Show] = None
        self.booked: Set[int] = set()
        self.selection: Set[int] = set()

    def load(self, show_id: UUID) -> "BookingFlow":
        """Fetch the show and its booked seats. Raises NotFound for an unknown show."""
        self.show = self.store.get_show(show_id)
        try:
            self.booked = self.store.list_booked_seats(show_id)
        except StoreFailure:
            logger.exception("Could not read booked seats for show %s; showing none", show_id)
            self.booked = set()
        self.selection = set()
        return self

    def _check_seat(self, seat_number: int) -> None:
        if self.show is None:
            raise RuntimeError("BookingFlow.load() must be called first")
        if not 1 <= seat_number <= self.show.total_seats:
            raise InvalidSeat(
                f"Seat {seat_number} does not exist (show has {self.show.total_seats} seats)"
            )

    def toggle_seat(self, seat_number: int) -> None:
        """Flip a seat in or out of the selection. Booked seats are left alone."""
        self._check_seat(seat_number)
        if seat_number in self.booked:
            return
        if seat_number in self.selection:
            self.selection.discard(seat_number)
        else:
            self.selection.add(seat_number)

    def select_seats(self, seat_numbers: Iterable[int]) -> None:
        """Replace the selection with a client-held one, e.g. from a request body.

        Seats booked at load time are kept so that ``submit`` reports them as a conflict.
        """
        seats = list(seat_numbers)
        if not seats:
            raise InvalidSeat("Select at least one seat")
        for n in seats:
            self._check_seat(n)
        self.selection = set(seats)

    @property
    def total(self) -> Decimal:
        if self.show is None:
            return Decimal("0")
        return Decimal(self.show.price) * len(self.selection)

    def summary(self) -> dict:
        return {
            "seats": format_seats(self.selection),
            "count": len(self.selection),
            "total": self.total,
        }

    def _reject(self, fresh_booked: Set[int]) -> SeatConflict:
        conflicting = self.selection & fresh_booked
        self.booked = fresh_booked
        self.selection -= conflicting
        logger.info(
            "Seat conflict on show %s for user %s: %s",
            self.show.id, self.user_id, format_seats(conflicting),
        )
        return SeatConflict(conflicting, self.selection, self.booked)

    def submit(self) -> Booking:
        """Persist the selection as a pending booking.

        Raises SeatConflict (selection trimmed to the seats still free),
        NotFound if the show is gone, or StoreFailure (selection unchanged).
        """
        if self.show is None:
            raise RuntimeError("BookingFlow.load() must be called first")
        if not self.selection:
            raise InvalidSeat("Select at least one seat")

        fresh_booked = self.store.list_booked_seats(self.show.id)
        if self.selection & fresh_booked:
            raise self._reject(fresh_booked)

        seats = sorted(self.selection)
        try:
            booking = self.store.insert_booking(self.user_id, self.show.id, seats, self.total)
        except SeatsTaken:
            fresh_booked = self.store.list_booked_seats(self.show.id)
            if self.selection & fresh_booked:
                # Another booking claimed one of the seats after our re-read
                raise self._reject(fresh_booked) from None
            # Rejected for another reason, e.g. the show was deleted meanwhile
            self.store.get_show(self.show.id)
            raise StoreFailure("Booking failed. Please try again.") from None

        logger.info(
            "Booking %s created for show %s: %s (%s)",
            booking.id, self.show.id, format_seats(seats), booking.total_amount,
        )
        self.booked |= self.selection
        self.selection = set()
        return booking


def confirm_booking(store: ShowStore, booking_id: UUID, user_id: UUID) -> Booking:
    """pending -> confirmed. Confirming an already confirmed booking changes nothing."""
    booking = store.get_booking(booking_id, user_id)
    if booking.status == "confirmed":
        return booking
    if booking.status != "pending":
        raise InvalidTransition(f"Cannot confirm a {booking.status} booking")
    booking = store.update_booking_status(booking, "confirmed")
    logger.info("Booking %s confirmed", booking_id)
    return booking


def cancel_booking(store: ShowStore, booking_id: UUID, user_id: UUID) -> Booking:
    """pending|confirmed -> cancelled, releasing the seats. Cancelled is terminal."""
    booking = store.get_booking(booking_id, user_id)
    if booking.status == "cancelled":
        return booking
    booking = store.update_booking_status(booking, "cancelled")
    logger.info("Booking %s cancelled, released %s", booking_id, format_seats(booking.seat_numbers))
    return booking

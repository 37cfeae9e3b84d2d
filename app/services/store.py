"""SQLAlchemy-backed show and booking store.

Every database error is translated here: callers see ``NotFound``,
``SeatsTaken`` or ``StoreFailure``, never a SQLAlchemy exception.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, List, Optional, Set, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import NotFound, SeatsTaken, StoreFailure
from app.models.booking import ACTIVE_STATUSES, Booking, BookingSeat
from app.models.show import Show

logger = logging.getLogger(__name__)


class ShowStore:
    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Shows
    # ------------------------------------------------------------------

    def get_show(self, show_id: UUID) -> Show:
        try:
            show = self.db.query(Show).filter(Show.id == show_id).first()
        except SQLAlchemyError as e:
            raise StoreFailure("Could not load show") from e
        if not show:
            raise NotFound("Show not found")
        return show

    def list_shows(self, upcoming: bool = True) -> List[Show]:
        """Shows ordered by date ascending; ``upcoming`` keeps only those not yet started."""
        query = self.db.query(Show)
        if upcoming:
            query = query.filter(Show.date >= datetime.now(timezone.utc))
        try:
            return query.order_by(Show.date.asc()).all()
        except SQLAlchemyError as e:
            raise StoreFailure("Could not list shows") from e

    def list_shows_with_booked_counts(self) -> List[Tuple[Show, int]]:
        claimed = (
            self.db.query(BookingSeat.show_id, func.count(BookingSeat.id).label("booked_count"))
            .group_by(BookingSeat.show_id)
            .subquery()
        )
        try:
            rows = (
                self.db.query(Show, func.coalesce(claimed.c.booked_count, 0))
                .outerjoin(claimed, claimed.c.show_id == Show.id)
                .order_by(Show.date.asc())
                .all()
            )
        except SQLAlchemyError as e:
            raise StoreFailure("Could not list shows") from e
        return [(show, int(count)) for show, count in rows]

    def create_show(self, **fields) -> Show:
        show = Show(**fields)
        self.db.add(show)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreFailure("Could not create show") from e
        self.db.refresh(show)
        logger.info("Created show %s (%s, %d seats)", show.id, show.name, show.total_seats)
        return show

    def delete_show(self, show_id: UUID) -> None:
        """Delete a show together with its bookings and seat claims."""
        show = self.get_show(show_id)
        self.db.delete(show)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreFailure("Could not delete show") from e
        logger.info("Deleted show %s", show_id)

    # ------------------------------------------------------------------
    # Bookings
    # ------------------------------------------------------------------

    def list_booked_seats(self, show_id: UUID, statuses: Iterable[str] = ACTIVE_STATUSES) -> Set[int]:
        """Union of seat numbers across the show's bookings in ``statuses``."""
        try:
            rows = (
                self.db.query(Booking.seat_numbers)
                .filter(Booking.show_id == show_id, Booking.status.in_(tuple(statuses)))
                .all()
            )
        except SQLAlchemyError as e:
            raise StoreFailure("Could not read booked seats") from e
        return {seat for (seats,) in rows for seat in seats}

    def insert_booking(
        self, user_id: UUID, show_id: UUID, seat_numbers: List[int], amount: Decimal
    ) -> Booking:
        """Insert a pending booking and claim its seats in one transaction.

        Raises SeatsTaken when the database rejects the rows on an integrity rule,
        normally because another active booking already holds one of the seats.
        """
        booking = Booking(
            user_id=user_id,
            show_id=show_id,
            seat_numbers=list(seat_numbers),
            status="pending",
            total_amount=amount,
        )
        booking.seats = [BookingSeat(show_id=show_id, seat_number=n) for n in seat_numbers]
        self.db.add(booking)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise SeatsTaken() from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreFailure("Booking failed. Please try again.") from e
        self.db.refresh(booking)
        return booking

    def get_booking(self, booking_id: UUID, user_id: Optional[UUID] = None) -> Booking:
        query = (
            self.db.query(Booking)
            .options(joinedload(Booking.show))
            .filter(Booking.id == booking_id)
        )
        if user_id is not None:
            query = query.filter(Booking.user_id == user_id)
        try:
            booking = query.first()
        except SQLAlchemyError as e:
            raise StoreFailure("Could not load booking") from e
        if not booking:
            raise NotFound("Booking not found")
        return booking

    def list_user_bookings(self, user_id: UUID, status: Optional[str] = None) -> List[Booking]:
        query = (
            self.db.query(Booking)
            .options(joinedload(Booking.show))
            .filter(Booking.user_id == user_id)
        )
        if status:
            query = query.filter(Booking.status == status)
        try:
            return query.order_by(Booking.created_at.desc()).all()
        except SQLAlchemyError as e:
            raise StoreFailure("Could not list bookings") from e

    def update_booking_status(self, booking: Booking, new_status: str) -> Booking:
        """Persist a status change; cancelling also releases the booking's seat claims."""
        booking.status = new_status
        if new_status == "cancelled":
            booking.cancelled_at = datetime.now(timezone.utc)
            booking.seats = []
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreFailure("Could not update booking") from e
        self.db.refresh(booking)
        return booking

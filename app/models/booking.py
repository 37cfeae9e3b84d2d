
import uuid
from sqlalchemy import Column, String, DateTime, func, DECIMAL, Integer, ForeignKey, JSON, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.session import Base

BOOKING_STATUSES = ("pending", "confirmed", "cancelled")
ACTIVE_STATUSES = ("pending", "confirmed")

class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    show_id = Column(Uuid, ForeignKey("shows.id", ondelete="CASCADE"), nullable=False, index=True)
    seat_numbers = Column(JSON, nullable=False) # sorted ascending
    status = Column(String(20), nullable=False, default="pending", index=True) # pending, confirmed, cancelled
    total_amount = Column(DECIMAL(10, 2), nullable=False)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User")
    show = relationship("Show", back_populates="bookings")
    seats = relationship("BookingSeat", back_populates="booking", cascade="all, delete-orphan")

class BookingSeat(Base):
    """A claim on one seat of a show, held while its booking is pending or confirmed."""
    __tablename__ = "booking_seats"
    __table_args__ = (
        UniqueConstraint("show_id", "seat_number", name="uq_booking_seats_show_seat"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_id = Column(Uuid, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    show_id = Column(Uuid, ForeignKey("shows.id", ondelete="CASCADE"), nullable=False)
    seat_number = Column(Integer, nullable=False)

    booking = relationship("Booking", back_populates="seats")

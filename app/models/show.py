
import uuid
from sqlalchemy import Column, String, DateTime, Integer, DECIMAL, Text, Uuid, CheckConstraint, func
from sqlalchemy.orm import relationship
from app.db.session import Base

class Show(Base):
    __tablename__ = "shows"
    __table_args__ = (
        CheckConstraint("total_seats > 0", name="ck_shows_total_seats_positive"),
        CheckConstraint("price >= 0", name="ck_shows_price_non_negative"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    date = Column(DateTime(timezone=True), nullable=False, index=True) # stored as UTC
    venue = Column(String(200), nullable=False)
    total_seats = Column(Integer, nullable=False)
    price = Column(DECIMAL(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    bookings = relationship(
        "Booking", back_populates="show", cascade="all, delete-orphan"
    )

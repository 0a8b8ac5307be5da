import enum
from sqlalchemy import Column, Integer, ForeignKey, TIMESTAMP, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from carpool.database import Base


class BookingStatus(str, enum.Enum):
    PENDING   = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

    def can_transition_to(self, target: "BookingStatus") -> bool:
        return target in _BOOKING_TRANSITIONS[self]

    @property
    def is_terminal(self) -> bool:
        return not _BOOKING_TRANSITIONS[self]


# A booking never re-enters PENDING
_BOOKING_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING:   frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}


class Booking(Base):
    __tablename__ = "bookings"

    id          = Column(Integer, primary_key=True, index=True)
    tripId      = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    passengerId = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    seatsBooked = Column(Integer, nullable=False)
    totalPrice  = Column(Integer, nullable=False)   # trip.price * seatsBooked at creation
    status      = Column(Enum(BookingStatus), default=BookingStatus.PENDING, nullable=False, index=True)
    createdAt   = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updatedAt   = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                         onupdate=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint('"seatsBooked" >= 1 AND "seatsBooked" <= 8', name="chk_booking_seats_range"),
    )

    # ─── Relationships ─────────────────────────────────────────────────────────
    trip      = relationship("Trip", back_populates="bookings")
    passenger = relationship("User", back_populates="bookings")

    def __repr__(self):
        return f"<Booking id={self.id} status={self.status} tripId={self.tripId}>"

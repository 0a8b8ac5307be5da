import enum
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Date, Time, ForeignKey, TIMESTAMP, Enum, CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from carpool.database import Base


class TripStatus(str, enum.Enum):
    ACTIVE    = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    def can_transition_to(self, target: "TripStatus") -> bool:
        return target in _TRIP_TRANSITIONS[self]

    @property
    def is_terminal(self) -> bool:
        return not _TRIP_TRANSITIONS[self]


# One entry per status; completed and cancelled are terminal
_TRIP_TRANSITIONS: dict[TripStatus, frozenset[TripStatus]] = {
    TripStatus.ACTIVE:    frozenset({TripStatus.COMPLETED, TripStatus.CANCELLED}),
    TripStatus.COMPLETED: frozenset(),
    TripStatus.CANCELLED: frozenset(),
}


class Trip(Base):
    __tablename__ = "trips"

    id             = Column(Integer, primary_key=True, index=True)
    driverId       = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    fromCity       = Column(String(150), nullable=False, index=True)
    toCity         = Column(String(150), nullable=False, index=True)
    tripDate       = Column(Date, nullable=False, index=True)
    tripTime       = Column(Time, nullable=False)
    price          = Column(Integer, nullable=False)          # per seat
    seats          = Column(Integer, nullable=False)          # fixed at creation
    availableSeats = Column(Integer, nullable=False)          # decremented on confirmation
    description    = Column(Text, nullable=True)
    duration       = Column(String(50), nullable=True)
    # Conditions
    noSmoking      = Column(Boolean, default=False, nullable=False)
    animalsAllowed = Column(Boolean, default=False, nullable=False)
    musicAllowed   = Column(Boolean, default=False, nullable=False)
    status         = Column(Enum(TripStatus), default=TripStatus.ACTIVE, nullable=False, index=True)
    createdAt      = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updatedAt      = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                            onupdate=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("seats >= 1 AND seats <= 8", name="chk_trip_seats_range"),
        CheckConstraint('"availableSeats" >= 0 AND "availableSeats" <= seats', name="chk_trip_available_seats"),
        CheckConstraint("price >= 0", name="chk_trip_price"),
    )

    # ─── Relationships ─────────────────────────────────────────────────────────
    driver   = relationship("User", back_populates="trips")
    bookings = relationship("Booking", back_populates="trip", cascade="all, delete-orphan")
    reviews  = relationship("Review", back_populates="trip", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Trip id={self.id} {self.fromCity}->{self.toCity} status={self.status}>"

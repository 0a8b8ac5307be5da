import enum
from sqlalchemy import Column, Integer, String, Float, Enum, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from carpool.database import Base


class RoleName(str, enum.Enum):
    DRIVER    = "driver"
    PASSENGER = "passenger"


class User(Base):
    __tablename__ = "users"

    id           = Column(Integer, primary_key=True, index=True)
    fullName     = Column(String(150), nullable=False)
    email        = Column(String(255), unique=True, nullable=False, index=True)
    phone        = Column(String(50), nullable=False)
    password     = Column(String(255), nullable=False)
    role         = Column(Enum(RoleName), default=RoleName.PASSENGER, nullable=False)
    # Driver car details (optional)
    carBrand     = Column(String(100), nullable=True)
    carModel     = Column(String(100), nullable=True)
    carYear      = Column(Integer, nullable=True)
    carColor     = Column(String(50), nullable=True)
    carNumber    = Column(String(50), nullable=True)
    # Derived from reviews, always recomputed, never incremented
    rating       = Column(Float, default=0.0, nullable=False)
    reviewsCount = Column(Integer, default=0, nullable=False)
    createdAt    = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updatedAt    = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                          onupdate=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    trips            = relationship("Trip", back_populates="driver")
    bookings         = relationship("Booking", back_populates="passenger")
    reviews_written  = relationship("Review", foreign_keys="Review.authorId", back_populates="author")
    reviews_received = relationship("Review", foreign_keys="Review.targetId", back_populates="target")
    audit_logs       = relationship("AuditLog", back_populates="user")

    @property
    def is_driver(self) -> bool:
        return self.role == RoleName.DRIVER

    @property
    def car_label(self) -> str:
        return " ".join(p for p in (self.carBrand, self.carModel) if p)

    def __repr__(self):
        return f"<User id={self.id} email={self.email} role={self.role}>"

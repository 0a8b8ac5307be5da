from sqlalchemy import Column, Integer, Text, ForeignKey, TIMESTAMP, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from carpool.database import Base


class Review(Base):
    __tablename__ = "reviews"

    id        = Column(Integer, primary_key=True, index=True)
    tripId    = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    authorId  = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    targetId  = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    rating    = Column(Integer, nullable=False)   # 1–5
    comment   = Column(Text, nullable=True)
    createdAt = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updatedAt = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                       onupdate=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="chk_rating_range"),
        UniqueConstraint("tripId", "authorId", "targetId", name="uq_review_trip_author_target"),
    )

    # ─── Relationships ─────────────────────────────────────────────────────────
    trip   = relationship("Trip", back_populates="reviews")
    author = relationship("User", foreign_keys=[authorId], back_populates="reviews_written")
    target = relationship("User", foreign_keys=[targetId], back_populates="reviews_received")

    def __repr__(self):
        return f"<Review id={self.id} target={self.targetId} rating={self.rating}>"

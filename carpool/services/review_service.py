import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from carpool.models.booking import Booking, BookingStatus
from carpool.models.review import Review
from carpool.models.trip import Trip
from carpool.models.user import User
from carpool.schemas.review import ReviewCreateRequest, ReviewUpdateRequest
from carpool.utils.audit import log_action
from carpool.utils.exceptions import (
    NotFoundException, ForbiddenException, DuplicateEntryException, ValidationException,
)

logger = logging.getLogger(__name__)


def _serialize(r: Review) -> dict:
    return {
        "id":        r.id,
        "tripId":    r.tripId,
        "rating":    r.rating,
        "comment":   r.comment,
        "author": {
            "id":       r.author.id,
            "fullName": r.author.fullName,
        },
        "target": {
            "id":       r.target.id,
            "fullName": r.target.fullName,
        },
        "trip": {
            "fromCity": r.trip.fromCity,
            "toCity":   r.trip.toCity,
            "tripDate": r.trip.tripDate.isoformat(),
        },
        "createdAt": r.createdAt.isoformat(),
        "updatedAt": r.updatedAt.isoformat(),
    }


class ReviewService:
    """
    Records reviews between trip participants and keeps the target user's
    rating / reviewsCount in step with the review table.

    The aggregate is always recomputed from scratch inside the same
    transaction as the review write, so the two can never diverge.
    """

    # ─── Aggregate ────────────────────────────────────────────────────────────
    def recompute_rating(self, db: Session, user_id: int) -> User:
        """Set user.rating / user.reviewsCount from every review targeting the user. Caller commits."""
        avg, count = db.query(func.avg(Review.rating), func.count(Review.id))\
                       .filter(Review.targetId == user_id).one()
        user = db.get(User, user_id)
        if not user:
            raise NotFoundException("User")
        user.rating       = float(avg) if count else 0.0
        user.reviewsCount = int(count)
        logger.info(f"Rating recomputed for user #{user_id}: {user.rating:.2f} over {user.reviewsCount} reviews")
        return user

    def _check_participation(self, db: Session, trip: Trip, author_id: int, target_id: int) -> None:
        """Author and target must be the driver and a confirmed passenger of the trip (either way round)."""
        if trip.driverId == author_id:
            passenger_id = target_id
        elif trip.driverId == target_id:
            passenger_id = author_id
        else:
            raise ForbiddenException("You didn't participate in this trip")

        confirmed = db.query(Booking).filter(
            Booking.tripId      == trip.id,
            Booking.passengerId == passenger_id,
            Booking.status      == BookingStatus.CONFIRMED,
        ).first()
        if not confirmed:
            raise ForbiddenException("You didn't participate in this trip")

    # ─── Submit ───────────────────────────────────────────────────────────────
    def submit_review(
        self, db: Session, trip_id: int, author_id: int, target_id: int,
        rating: int, comment: str | None,
    ) -> Review:
        if not 1 <= rating <= 5:
            raise ValidationException("Rating must be between 1 and 5", field="rating")
        if author_id == target_id:
            raise ValidationException("You cannot review yourself", field="targetId")

        trip = db.get(Trip, trip_id)
        if not trip:
            raise NotFoundException("Trip")

        self._check_participation(db, trip, author_id, target_id)

        existing = db.query(Review).filter(
            Review.tripId   == trip_id,
            Review.authorId == author_id,
            Review.targetId == target_id,
        ).first()
        if existing:
            raise DuplicateEntryException("Review already exists for this trip and user")

        review = Review(
            tripId=trip_id,
            authorId=author_id,
            targetId=target_id,
            rating=rating,
            comment=comment,
        )
        db.add(review)
        try:
            db.flush()
        except IntegrityError:
            # Lost a race against an identical submission
            db.rollback()
            raise DuplicateEntryException("Review already exists for this trip and user")

        self.recompute_rating(db, target_id)
        log_action(db, author_id, "REVIEW", "Review", review.id,
                   f"User #{author_id} rated user #{target_id} {rating}/5 for trip #{trip_id}")
        db.commit()
        db.refresh(review)
        return review

    def create_review(self, db: Session, data: ReviewCreateRequest, current_user: User) -> dict:
        review = self.submit_review(
            db, data.tripId, current_user.id, data.targetId, data.rating, data.comment,
        )
        return _serialize(review)

    # ─── Update ───────────────────────────────────────────────────────────────
    def update_review(self, db: Session, review_id: int, data: ReviewUpdateRequest, current_user: User) -> dict:
        review = db.get(Review, review_id)
        if not review:
            raise NotFoundException("Review")
        if review.authorId != current_user.id:
            raise ForbiddenException("Not authorized to edit this review")

        review.rating  = data.rating
        review.comment = data.comment
        db.flush()

        self.recompute_rating(db, review.targetId)
        log_action(db, current_user.id, "UPDATE", "Review", review.id,
                   f"Review #{review.id} changed to {data.rating}/5")
        db.commit()
        db.refresh(review)
        return _serialize(review)

    # ─── Queries ──────────────────────────────────────────────────────────────
    def list_about_user(self, db: Session, user_id: int) -> list[dict]:
        if not db.get(User, user_id):
            raise NotFoundException("User")
        items = db.query(Review).filter(Review.targetId == user_id)\
                  .order_by(Review.createdAt.desc(), Review.id.desc()).all()
        return [_serialize(r) for r in items]

    def list_written_by(self, db: Session, user_id: int) -> list[dict]:
        items = db.query(Review).filter(Review.authorId == user_id)\
                  .order_by(Review.createdAt.desc(), Review.id.desc()).all()
        return [_serialize(r) for r in items]

    def find_mine_for_trip(self, db: Session, trip_id: int, current_user: User) -> dict:
        review = db.query(Review).filter(
            Review.tripId   == trip_id,
            Review.authorId == current_user.id,
        ).order_by(Review.id.desc()).first()
        if not review:
            return {"exists": False, "review": None}
        return {"exists": True, "review": _serialize(review)}

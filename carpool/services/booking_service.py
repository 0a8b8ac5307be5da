import logging

from sqlalchemy import case, func, update
from sqlalchemy.orm import Session

from carpool.models.booking import Booking, BookingStatus
from carpool.models.trip import Trip, TripStatus
from carpool.models.user import User
from carpool.schemas.booking import BookingCreateRequest, RatePassengerRequest
from carpool.services.review_service import ReviewService
from carpool.utils.audit import log_action
from carpool.utils.exceptions import (
    NotFoundException, ForbiddenException, ValidationException,
    InsufficientSeatsException, SeatsExhaustedException,
    BookingNotPendingException, BookingNotConfirmedException,
)

logger = logging.getLogger(__name__)


def _serialize(b: Booking) -> dict:
    return {
        "id":          b.id,
        "tripId":      b.tripId,
        "passengerId": b.passengerId,
        "seatsBooked": b.seatsBooked,
        "totalPrice":  b.totalPrice,
        "status":      b.status.value,
        "createdAt":   b.createdAt.isoformat(),
        "updatedAt":   b.updatedAt.isoformat(),
    }


def _serialize_for_passenger(b: Booking) -> dict:
    data = _serialize(b)
    data.update({
        "fromCity":   b.trip.fromCity,
        "toCity":     b.trip.toCity,
        "tripDate":   b.trip.tripDate.isoformat(),
        "tripTime":   b.trip.tripTime.strftime("%H:%M"),
        "tripStatus": b.trip.status.value,
        "driverName": b.trip.driver.fullName,
    })
    return data


def _serialize_for_driver(b: Booking) -> dict:
    data = _serialize(b)
    data.update({
        "fromCity":       b.trip.fromCity,
        "toCity":         b.trip.toCity,
        "tripDate":       b.trip.tripDate.isoformat(),
        "tripTime":       b.trip.tripTime.strftime("%H:%M"),
        "passengerName":  b.passenger.fullName,
        "passengerPhone": b.passenger.phone,
    })
    return data


class BookingService:

    def __init__(self, reviews: ReviewService):
        self.reviews = reviews

    # ─── Create ───────────────────────────────────────────────────────────────
    def create_booking(self, db: Session, data: BookingCreateRequest, current_user: User) -> dict:
        trip = db.query(Trip).filter(
            Trip.id == data.tripId,
            Trip.status == TripStatus.ACTIVE,
        ).first()
        if not trip:
            raise NotFoundException("Active trip")
        if trip.driverId == current_user.id:
            raise ForbiddenException("You cannot book your own trip")
        if data.seatsBooked > trip.availableSeats:
            raise InsufficientSeatsException(trip.availableSeats)

        # Seats are only reserved on confirmation; price is snapshotted now
        b = Booking(
            tripId=trip.id,
            passengerId=current_user.id,
            seatsBooked=data.seatsBooked,
            totalPrice=trip.price * data.seatsBooked,
            status=BookingStatus.PENDING,
        )
        db.add(b)
        db.flush()
        log_action(db, current_user.id, "CREATE", "Booking", b.id,
                   f"{current_user.fullName} requested {b.seatsBooked} seat(s) on trip #{trip.id}")
        db.commit()
        db.refresh(b)
        return _serialize(b)

    # ─── Decide (driver confirms / rejects) ───────────────────────────────────
    def decide_booking(self, db: Session, booking_id: int, new_status: BookingStatus, current_user: User) -> dict:
        if not BookingStatus.PENDING.can_transition_to(new_status):
            raise ValidationException("status must be 'confirmed' or 'cancelled'", field="status")

        b = db.get(Booking, booking_id)
        if not b:
            raise NotFoundException("Booking")
        if b.trip.driverId != current_user.id:
            raise ForbiddenException("You are not the driver of this trip")
        if not b.status.can_transition_to(new_status):
            raise BookingNotPendingException()

        # Conditional flip: a concurrent decision on the same booking matches zero rows
        flipped = db.execute(
            update(Booking)
            .where(Booking.id == b.id, Booking.status == BookingStatus.PENDING)
            .values(status=new_status, updatedAt=func.now())
            .execution_options(synchronize_session=False)
        ).rowcount
        if flipped != 1:
            db.rollback()
            raise BookingNotPendingException()

        if new_status == BookingStatus.CONFIRMED:
            # Guarded decrement; capacity checked at creation may be stale by now
            reserved = db.execute(
                update(Trip)
                .where(Trip.id == b.tripId, Trip.availableSeats >= b.seatsBooked)
                .values(availableSeats=Trip.availableSeats - b.seatsBooked, updatedAt=func.now())
                .execution_options(synchronize_session=False)
            ).rowcount
            if reserved != 1:
                db.rollback()
                logger.info(f"Booking #{b.id} not confirmed: trip #{b.tripId} lacks {b.seatsBooked} free seat(s)")
                raise SeatsExhaustedException()

        action = "CONFIRM" if new_status == BookingStatus.CONFIRMED else "REJECT"
        log_action(db, current_user.id, action, "Booking", b.id,
                   f"Booking #{b.id} {new_status.value} ({b.seatsBooked} seat(s))")
        db.commit()
        db.refresh(b)
        db.refresh(b.trip)
        logger.info(f"Booking #{b.id} {new_status.value}; trip #{b.tripId} has {b.trip.availableSeats} seat(s) left")

        data = _serialize(b)
        data["availableSeats"] = b.trip.availableSeats
        return data

    # ─── Listings ─────────────────────────────────────────────────────────────
    def list_my_bookings(self, db: Session, current_user: User) -> list[dict]:
        items = db.query(Booking).filter(Booking.passengerId == current_user.id)\
                  .order_by(Booking.createdAt.desc(), Booking.id.desc()).all()
        return [_serialize_for_passenger(b) for b in items]

    def list_driver_bookings(self, db: Session, current_user: User) -> list[dict]:
        status_rank = case(
            (Booking.status == BookingStatus.PENDING, 0),
            (Booking.status == BookingStatus.CONFIRMED, 1),
            else_=2,
        )
        items = db.query(Booking).join(Trip, Booking.tripId == Trip.id)\
                  .filter(Trip.driverId == current_user.id)\
                  .order_by(status_rank, Booking.createdAt.desc(), Booking.id.desc()).all()
        return [_serialize_for_driver(b) for b in items]

    # ─── Driver rates passenger ───────────────────────────────────────────────
    def rate_passenger(self, db: Session, booking_id: int, data: RatePassengerRequest, current_user: User) -> dict:
        b = db.get(Booking, booking_id)
        if not b:
            raise NotFoundException("Booking")
        if b.trip.driverId != current_user.id:
            raise ForbiddenException("You are not the driver of this trip")
        if b.status != BookingStatus.CONFIRMED:
            raise BookingNotConfirmedException()

        review = self.reviews.submit_review(
            db, b.tripId, current_user.id, b.passengerId, data.rating, data.comment,
        )
        return {"reviewId": review.id, "bookingId": b.id, "targetId": b.passengerId}

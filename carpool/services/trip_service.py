import logging
from datetime import date

from sqlalchemy.orm import Session

from carpool.models.booking import Booking, BookingStatus
from carpool.models.trip import Trip, TripStatus
from carpool.models.user import User
from carpool.schemas.trip import TripCreateRequest
from carpool.utils.audit import log_action
from carpool.utils.exceptions import NotFoundException, ForbiddenException, TripNotActiveException

logger = logging.getLogger(__name__)


def _serialize(t: Trip) -> dict:
    return {
        "id":             t.id,
        "driverId":       t.driverId,
        "fromCity":       t.fromCity,
        "toCity":         t.toCity,
        "tripDate":       t.tripDate.isoformat(),
        "tripTime":       t.tripTime.strftime("%H:%M"),
        "price":          t.price,
        "seats":          t.seats,
        "availableSeats": t.availableSeats,
        "description":    t.description,
        "duration":       t.duration,
        "noSmoking":      t.noSmoking,
        "animalsAllowed": t.animalsAllowed,
        "musicAllowed":   t.musicAllowed,
        "status":         t.status.value,
        "createdAt":      t.createdAt.isoformat(),
    }


def _serialize_listing(t: Trip) -> dict:
    data = _serialize(t)
    data["driver"] = {
        "id":       t.driver.id,
        "fullName": t.driver.fullName,
        "rating":   t.driver.rating,
        "car":      t.driver.car_label,
        "carColor": t.driver.carColor,
    }
    return data


def _serialize_detail(t: Trip) -> dict:
    # Driver contact is only surfaced on the single-trip view
    data = _serialize_listing(t)
    data["driver"].update({
        "phone":        t.driver.phone,
        "carNumber":    t.driver.carNumber,
        "reviewsCount": t.driver.reviewsCount,
    })
    return data


class TripService:

    def create_trip(self, db: Session, data: TripCreateRequest, current_user: User) -> dict:
        if not current_user.is_driver:
            raise ForbiddenException("Only drivers can create trips")

        t = Trip(
            driverId=current_user.id,
            fromCity=data.fromCity,
            toCity=data.toCity,
            tripDate=data.tripDate,
            tripTime=data.tripTime,
            price=data.price,
            seats=data.seats,
            availableSeats=data.seats,
            description=data.description,
            duration=data.duration,
            noSmoking=data.noSmoking,
            animalsAllowed=data.animalsAllowed,
            musicAllowed=data.musicAllowed,
            status=TripStatus.ACTIVE,
        )
        db.add(t)
        db.flush()
        log_action(db, current_user.id, "CREATE", "Trip", t.id,
                   f"Trip {t.fromCity} -> {t.toCity} on {t.tripDate.isoformat()} ({t.seats} seats)")
        db.commit()
        db.refresh(t)
        return _serialize_listing(t)

    def search_trips(
        self, db: Session, page: int, limit: int,
        from_city: str | None, to_city: str | None, trip_date: date | None,
    ) -> tuple[list[dict], int]:
        q = db.query(Trip).filter(
            Trip.status == TripStatus.ACTIVE,
            Trip.availableSeats > 0,
        )
        if from_city: q = q.filter(Trip.fromCity.ilike(f"%{from_city.strip()}%"))
        if to_city:   q = q.filter(Trip.toCity.ilike(f"%{to_city.strip()}%"))
        if trip_date: q = q.filter(Trip.tripDate == trip_date)

        total = q.count()
        items = q.order_by(Trip.tripDate.asc(), Trip.tripTime.asc(), Trip.id.asc())\
                 .offset((page - 1) * limit).limit(limit).all()
        return [_serialize_listing(t) for t in items], total

    def get_trip(self, db: Session, trip_id: int) -> dict:
        t = db.get(Trip, trip_id)
        if not t:
            raise NotFoundException("Trip")
        return _serialize_detail(t)

    def list_my_trips(self, db: Session, current_user: User) -> list[dict]:
        if current_user.is_driver:
            trips = db.query(Trip).filter(Trip.driverId == current_user.id)\
                      .order_by(Trip.tripDate.desc(), Trip.tripTime.desc(), Trip.id.desc()).all()
            return [_serialize(t) for t in trips]

        bookings = db.query(Booking).join(Trip, Booking.tripId == Trip.id)\
                     .filter(Booking.passengerId == current_user.id)\
                     .order_by(Trip.tripDate.desc(), Trip.tripTime.desc(), Booking.id.desc()).all()
        result = []
        for b in bookings:
            item = _serialize(b.trip)
            item.update({
                "bookingId":     b.id,
                "seatsBooked":   b.seatsBooked,
                "bookingStatus": b.status.value,
                "tripStatus":    b.trip.status.value,
            })
            result.append(item)
        return result

    # ─── Status transitions ───────────────────────────────────────────────────
    def _get_owned(self, db: Session, trip_id: int, current_user: User) -> Trip:
        t = db.get(Trip, trip_id)
        if not t:
            raise NotFoundException("Trip")
        if t.driverId != current_user.id:
            raise ForbiddenException("You are not the owner of this trip")
        return t

    def cancel_trip(self, db: Session, trip_id: int, current_user: User) -> dict:
        t = self._get_owned(db, trip_id, current_user)
        if not t.status.can_transition_to(TripStatus.CANCELLED):
            raise TripNotActiveException(t.status.value)

        t.status = TripStatus.CANCELLED
        # Pending requests die with the trip; confirmed bookings are left as they are
        cascaded = db.query(Booking).filter(
            Booking.tripId == t.id,
            Booking.status == BookingStatus.PENDING,
        ).update({Booking.status: BookingStatus.CANCELLED}, synchronize_session=False)

        log_action(db, current_user.id, "CANCEL", "Trip", t.id,
                   f"Trip #{t.id} cancelled, {cascaded} pending booking(s) cancelled")
        db.commit()
        db.refresh(t)
        logger.info(f"Trip #{t.id} cancelled; {cascaded} pending booking(s) cancelled")

        data = _serialize(t)
        data["cancelledBookings"] = cascaded
        return data

    def complete_trip(self, db: Session, trip_id: int, current_user: User) -> dict:
        t = self._get_owned(db, trip_id, current_user)
        if not t.status.can_transition_to(TripStatus.COMPLETED):
            raise TripNotActiveException(t.status.value)

        t.status = TripStatus.COMPLETED
        log_action(db, current_user.id, "COMPLETE", "Trip", t.id, f"Trip #{t.id} completed")
        db.commit()
        db.refresh(t)
        return _serialize(t)

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from carpool.context import AppContext
from carpool.database import get_context, get_db
from carpool.dependencies import get_current_user
from carpool.models.user import User
from carpool.schemas.booking import BookingCreateRequest, BookingStatusRequest, RatePassengerRequest
from carpool.schemas.common import success_response

router = APIRouter(prefix="/bookings")


@router.post("", status_code=status.HTTP_201_CREATED, summary="Request seats on a trip")
def create_booking(
    body: BookingCreateRequest,
    db:   Session    = Depends(get_db),
    ctx:  AppContext = Depends(get_context),
    current_user: User = Depends(get_current_user),
):
    return success_response("Booking created successfully", ctx.bookings.create_booking(db, body, current_user))


@router.get("/my-bookings", summary="My bookings as a passenger")
def my_bookings(
    db:  Session    = Depends(get_db),
    ctx: AppContext = Depends(get_context),
    current_user: User = Depends(get_current_user),
):
    return success_response("Bookings retrieved", ctx.bookings.list_my_bookings(db, current_user))


@router.get("/driver", summary="Booking requests on my trips (Driver)")
def driver_bookings(
    db:  Session    = Depends(get_db),
    ctx: AppContext = Depends(get_context),
    current_user: User = Depends(get_current_user),
):
    return success_response("Bookings retrieved", ctx.bookings.list_driver_bookings(db, current_user))


@router.patch("/{booking_id}/status", summary="Confirm or reject a pending booking (Trip driver)")
def update_booking_status(
    booking_id: int,
    body:       BookingStatusRequest,
    db:         Session    = Depends(get_db),
    ctx:        AppContext = Depends(get_context),
    current_user: User     = Depends(get_current_user),
):
    data = ctx.bookings.decide_booking(db, booking_id, body.status, current_user)
    return success_response("Booking status updated", data)


@router.post("/{booking_id}/rate",
             status_code=status.HTTP_201_CREATED,
             summary="Rate the passenger of a confirmed booking (Trip driver)")
def rate_passenger(
    booking_id: int,
    body:       RatePassengerRequest,
    db:         Session    = Depends(get_db),
    ctx:        AppContext = Depends(get_context),
    current_user: User     = Depends(get_current_user),
):
    return success_response("Passenger rated successfully",
                            ctx.bookings.rate_passenger(db, booking_id, body, current_user))

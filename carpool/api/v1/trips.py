from datetime import date
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from carpool.context import AppContext
from carpool.database import get_context, get_db
from carpool.dependencies import get_current_user, get_driver_user
from carpool.models.user import User
from carpool.schemas.common import success_response, paginated_response
from carpool.schemas.trip import TripCreateRequest

router = APIRouter(prefix="/trips")


@router.post("", status_code=status.HTTP_201_CREATED, summary="Publish a trip (Driver)")
def create_trip(
    body: TripCreateRequest,
    db:   Session    = Depends(get_db),
    ctx:  AppContext = Depends(get_context),
    current_user: User = Depends(get_driver_user),
):
    return success_response("Trip created successfully", ctx.trips.create_trip(db, body, current_user))


@router.get("/search", summary="Search active trips with free seats")
def search_trips(
    from_city: Optional[str]  = Query(None, alias="from", description="Departure city (partial, case-insensitive)"),
    to_city:   Optional[str]  = Query(None, alias="to",   description="Destination city (partial, case-insensitive)"),
    trip_date: Optional[date] = Query(None, alias="date", description="Exact date, YYYY-MM-DD"),
    page:      int            = Query(1, ge=1),
    limit:     int            = Query(20, ge=1, le=50),
    db:        Session        = Depends(get_db),
    ctx:       AppContext     = Depends(get_context),
):
    data, total = ctx.trips.search_trips(db, page, limit, from_city, to_city, trip_date)
    return paginated_response("Trips retrieved successfully", data, total, page, limit)


@router.get("/my-trips", summary="My trips (driver: published, passenger: booked)")
def my_trips(
    db:  Session    = Depends(get_db),
    ctx: AppContext = Depends(get_context),
    current_user: User = Depends(get_current_user),
):
    return success_response("Trips retrieved", ctx.trips.list_my_trips(db, current_user))


@router.get("/{trip_id}", summary="Get trip detail with driver contact")
def get_trip(trip_id: int, db: Session = Depends(get_db), ctx: AppContext = Depends(get_context)):
    return success_response("Trip retrieved", ctx.trips.get_trip(db, trip_id))


@router.patch("/{trip_id}/cancel", summary="Cancel trip (Owner), pending bookings are cancelled too")
def cancel_trip(
    trip_id: int,
    db:      Session    = Depends(get_db),
    ctx:     AppContext = Depends(get_context),
    current_user: User  = Depends(get_current_user),
):
    return success_response("Trip cancelled", ctx.trips.cancel_trip(db, trip_id, current_user))


@router.patch("/{trip_id}/complete", summary="Complete trip (Owner)")
def complete_trip(
    trip_id: int,
    db:      Session    = Depends(get_db),
    ctx:     AppContext = Depends(get_context),
    current_user: User  = Depends(get_current_user),
):
    return success_response("Trip completed", ctx.trips.complete_trip(db, trip_id, current_user))

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from carpool.context import AppContext
from carpool.database import get_context, get_db
from carpool.dependencies import get_current_user
from carpool.models.user import User
from carpool.schemas.common import success_response
from carpool.schemas.review import ReviewCreateRequest, ReviewUpdateRequest

router = APIRouter(prefix="/reviews")


@router.post("", status_code=status.HTTP_201_CREATED, summary="Review a fellow participant of a trip")
def create_review(
    body: ReviewCreateRequest,
    db:   Session    = Depends(get_db),
    ctx:  AppContext = Depends(get_context),
    current_user: User = Depends(get_current_user),
):
    return success_response("Review created successfully", ctx.reviews.create_review(db, body, current_user))


@router.put("/{review_id}", summary="Edit my review")
def update_review(
    review_id: int,
    body:      ReviewUpdateRequest,
    db:        Session    = Depends(get_db),
    ctx:       AppContext = Depends(get_context),
    current_user: User    = Depends(get_current_user),
):
    return success_response("Review updated successfully",
                            ctx.reviews.update_review(db, review_id, body, current_user))


@router.get("/user/{user_id}", summary="Reviews about a user")
def user_reviews(
    user_id: int,
    db:      Session    = Depends(get_db),
    ctx:     AppContext = Depends(get_context),
    _:       User       = Depends(get_current_user),
):
    return success_response("Reviews retrieved", ctx.reviews.list_about_user(db, user_id))


@router.get("/my-reviews", summary="Reviews about me")
def my_reviews(
    db:  Session    = Depends(get_db),
    ctx: AppContext = Depends(get_context),
    current_user: User = Depends(get_current_user),
):
    return success_response("Reviews retrieved", ctx.reviews.list_about_user(db, current_user.id))


@router.get("/written", summary="Reviews I wrote")
def written_reviews(
    db:  Session    = Depends(get_db),
    ctx: AppContext = Depends(get_context),
    current_user: User = Depends(get_current_user),
):
    return success_response("Reviews retrieved", ctx.reviews.list_written_by(db, current_user.id))


@router.get("/trip/{trip_id}/mine", summary="Check whether I already reviewed someone on a trip")
def my_review_for_trip(
    trip_id: int,
    db:      Session    = Depends(get_db),
    ctx:     AppContext = Depends(get_context),
    current_user: User  = Depends(get_current_user),
):
    return success_response("Review lookup", ctx.reviews.find_mine_for_trip(db, trip_id, current_user))

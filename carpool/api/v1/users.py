from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from carpool.context import AppContext
from carpool.database import get_context, get_db
from carpool.dependencies import get_current_user
from carpool.models.user import User
from carpool.schemas.common import success_response
from carpool.schemas.user import ProfileUpdateRequest

router = APIRouter(prefix="/users")


# GET /users/profile: Any authenticated user
@router.get("/profile", status_code=status.HTTP_200_OK, summary="Get my profile")
def get_profile(current_user: User = Depends(get_current_user), ctx: AppContext = Depends(get_context)):
    return success_response("Profile retrieved", ctx.users.get_profile(current_user))


# PUT /users/profile: Any authenticated user
@router.put("/profile", status_code=status.HTTP_200_OK, summary="Update my profile and car details")
def update_profile(
    body: ProfileUpdateRequest,
    db:   Session    = Depends(get_db),
    ctx:  AppContext = Depends(get_context),
    current_user: User = Depends(get_current_user),
):
    return success_response("Profile updated successfully", ctx.users.update_profile(db, body, current_user))


# GET /users/{id}: public profile, no contact details
@router.get("/{user_id}", status_code=status.HTTP_200_OK, summary="Get a user's public profile")
def get_user(
    user_id: int,
    db:      Session    = Depends(get_db),
    ctx:     AppContext = Depends(get_context),
    _:       User       = Depends(get_current_user),
):
    return success_response("User retrieved", ctx.users.get_public_profile(db, user_id))

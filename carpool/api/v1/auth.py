from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from carpool.context import AppContext
from carpool.database import get_context, get_db
from carpool.dependencies import get_current_user
from carpool.models.user import User
from carpool.schemas.auth import LoginRequest, RegisterRequest
from carpool.schemas.common import success_response

router = APIRouter(prefix="/auth")


# ─── POST /auth/register ──────────────────────────────────────────────────────
@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new driver or passenger account",
)
def register(data: RegisterRequest, db: Session = Depends(get_db), ctx: AppContext = Depends(get_context)):
    """
    Register a new user and sign them in.
    - Email must be unique.
    - isDriver=true registers a driver, otherwise a passenger.
    """
    return success_response("User registered successfully", ctx.auth.register(db, data))


# ─── POST /auth/login ─────────────────────────────────────────────────────────
@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    summary="Login and receive an access token",
)
def login(data: LoginRequest, db: Session = Depends(get_db), ctx: AppContext = Depends(get_context)):
    return success_response("Login successful", ctx.auth.login(db, data))


# ─── GET /auth/me ─────────────────────────────────────────────────────────────
@router.get(
    "/me",
    status_code=status.HTTP_200_OK,
    summary="Get current authenticated user",
)
def get_me(current_user: User = Depends(get_current_user), ctx: AppContext = Depends(get_context)):
    return success_response("User profile retrieved", ctx.users.get_profile(current_user))

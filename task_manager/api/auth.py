"""Authentication API endpoints."""

import logging

from fastapi import APIRouter, status

from task_manager.api.dependencies import CurrentUser, DbSession
from task_manager.errors import Conflict, Unauthorized
from task_manager.schemas.auth import AuthData, UserLogin, UserRegister, UserResponse
from task_manager.schemas.common import Envelope
from task_manager.services.auth import (
    authenticate_user,
    create_access_token,
    create_user,
    get_user_by_email,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/register", response_model=Envelope[AuthData], status_code=status.HTTP_201_CREATED
)
def register(user_data: UserRegister, db: DbSession):
    """Register a new user."""
    if get_user_by_email(db, user_data.email):
        raise Conflict("User already exists with this email")

    user = create_user(db, user_data.name, user_data.email, user_data.password)
    token = create_access_token(user.id)

    return Envelope(
        message="User registered successfully",
        data=AuthData(id=user.id, name=user.name, email=user.email, token=token),
    )


@router.post("/login", response_model=Envelope[AuthData])
def login(credentials: UserLogin, db: DbSession):
    """Login with email and password."""
    user = authenticate_user(db, credentials.email, credentials.password)

    # Same message whether the email or the password was wrong
    if not user:
        raise Unauthorized("Invalid email or password")

    logger.info(f"User {user.id} logged in")
    token = create_access_token(user.id)

    return Envelope(
        message="Login successful",
        data=AuthData(id=user.id, name=user.name, email=user.email, token=token),
    )


@router.get("/me", response_model=Envelope[UserResponse])
def get_me(current_user: CurrentUser):
    """Get current user information."""
    return Envelope(data=UserResponse.model_validate(current_user))


@router.post("/logout", response_model=Envelope[dict])
def logout(current_user: CurrentUser):
    """Logout (client should discard token)."""
    return Envelope(message="Logged out successfully")

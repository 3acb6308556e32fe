"""FastAPI dependencies for authentication and database."""

import logging
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from task_manager.database import get_db
from task_manager.errors import InvalidToken, Unauthorized
from task_manager.models.user import User
from task_manager.services.auth import decode_access_token, get_user

logger = logging.getLogger(__name__)

# Missing credentials are reported by get_current_user, not by HTTPBearer
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from the bearer token."""
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Not authorized, no token provided")

    try:
        user_id = decode_access_token(credentials.credentials)
    except InvalidToken as e:
        logger.warning(f"Rejected token: {e}")
        raise Unauthorized("Not authorized, token failed") from e

    user = get_user(db, user_id)
    if user is None:
        raise Unauthorized("User not found")

    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
DbSession = Annotated[Session, Depends(get_db)]

"""Authentication schemas."""

from datetime import datetime
from typing import Annotated, Any

from pydantic import EmailStr, Field, ValidationError, WrapValidator, field_validator
from pydantic_core import PydanticCustomError

from task_manager.schemas.common import ApiModel, clean_text


def _email_message(value: Any, handler):
    try:
        return handler(value)
    except ValidationError:
        raise PydanticCustomError("email", "Please provide a valid email") from None


Email = Annotated[EmailStr, WrapValidator(_email_message)]


class UserRegister(ApiModel):
    """User registration request."""

    name: str = Field(None, validate_default=True)
    email: Email = Field(None, validate_default=True)
    password: str = Field(None, validate_default=True)

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, value: Any) -> str | None:
        return clean_text(
            value,
            max_length=50,
            required="Name is required",
            too_long="Name cannot be more than 50 characters",
        )

    @field_validator("email", mode="after")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("password", mode="before")
    @classmethod
    def check_password(cls, value: Any) -> str:
        if value is None or value == "":
            raise PydanticCustomError("required", "Password is required")
        if not isinstance(value, str) or len(value) < 6:
            raise PydanticCustomError("too_short", "Password must be at least 6 characters")
        if len(value) > 128:
            raise PydanticCustomError("too_long", "Password cannot be more than 128 characters")
        return value


class UserLogin(ApiModel):
    """User login request."""

    email: Email = Field(None, validate_default=True)
    password: str = Field(None, validate_default=True)

    @field_validator("email", mode="after")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("password", mode="before")
    @classmethod
    def check_password(cls, value: Any) -> str:
        if not isinstance(value, str) or not value:
            raise PydanticCustomError("required", "Password is required")
        return value


class AuthData(ApiModel):
    """User identity plus a freshly issued token."""

    id: int
    name: str
    email: str
    token: str


class UserResponse(ApiModel):
    """Public user profile."""

    id: int
    name: str
    email: str
    created_at: datetime

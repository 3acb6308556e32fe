"""Shared schema building blocks."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, SerializerFunctionWrapHandler, model_serializer
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

T = TypeVar("T")


class ApiModel(BaseModel):
    """Base for request and response bodies.

    JSON uses camelCase field names; requests may also use the snake_case names.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Envelope(ApiModel, Generic[T]):
    """Uniform wrapper for every API response."""

    success: bool = True
    message: str | None = None
    count: int | None = None
    data: T | None = None

    @model_serializer(mode="wrap")
    def _drop_unset_keys(self, handler: SerializerFunctionWrapHandler):
        # Only top-level keys; nulls inside data are kept
        return {k: v for k, v in handler(self).items() if v is not None}


def clean_text(
    value: Any,
    *,
    max_length: int,
    too_long: str,
    required: str | None = None,
) -> str | None:
    """Trim a text field and enforce presence and length rules.

    When ``required`` is given, missing or blank values raise with that message.
    Otherwise a missing value passes through as None.
    """
    if value is None:
        if required:
            raise PydanticCustomError("required", required)
        return None
    if not isinstance(value, str):
        raise PydanticCustomError("string_type", "Must be a string")
    value = value.strip()
    if required and not value:
        raise PydanticCustomError("required", required)
    if len(value) > max_length:
        raise PydanticCustomError("too_long", too_long)
    return value

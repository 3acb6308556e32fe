"""Error taxonomy and the top-level exception translator.

Handlers raise the ``AppError`` subclasses below for failures they know about.
Everything else falls through to the handlers installed by
``register_exception_handlers``, which map framework and database errors onto
the same taxonomy. Every error leaves the API as the standard envelope::

    {"success": false, "message": "..."}
"""

import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from task_manager.config import get_settings

logger = logging.getLogger(__name__)

_REQUEST_PARTS = ("body", "query", "path", "header", "cookie")


class AppError(Exception):
    """Base class for errors with a known HTTP mapping."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    headers: dict[str, str] | None = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_content(self) -> dict[str, Any]:
        return {"success": False, "message": self.message}


class ValidationFailed(AppError):
    """Request payload broke one or more field rules."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: list[dict[str, str]]):
        super().__init__(", ".join(e["message"] for e in errors) or "Validation failed")
        self.errors = errors

    def to_content(self) -> dict[str, Any]:
        content = super().to_content()
        content["errors"] = self.errors
        return content


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidToken(Exception):
    """Token signature, payload or expiry check failed."""


def field_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Flatten pydantic error dicts into ``{field, message}`` pairs."""
    items = []
    for error in errors:
        loc = list(error.get("loc", ()))
        if len(loc) > 1 and loc[0] in _REQUEST_PARTS:
            loc = loc[1:]
        field = ".".join(str(part) for part in loc) or "body"
        items.append({"field": field, "message": error.get("msg", "Invalid value")})
    return items


def validate_payload(model: type[BaseModel], data: dict[str, Any]) -> Any:
    """Validate data against a schema outside of request parsing.

    Raises ValidationFailed with the same itemized errors the request gate reports.
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ValidationFailed(field_errors(e.errors())) from e


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_content(),
        headers=exc.headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Aggregate every violated rule into one 400 response.

    A path parameter that cannot be parsed (e.g. a non-numeric id) can never
    name an existing record, so it is reported as a missing resource instead.
    """
    errors = exc.errors()
    if any(e.get("loc", ())[:1] == ("path",) for e in errors):
        return await app_error_handler(request, NotFound("Resource not found"))
    return await app_error_handler(request, ValidationFailed(field_errors(errors)))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = "Route not found"
    else:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": message},
        headers=getattr(exc, "headers", None),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Duplicate field value entered"},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    content: dict[str, Any] = {"success": False, "message": "Server error"}
    if get_settings().is_development:
        content["error"] = str(exc)
        content["stack"] = "".join(traceback.format_exception(exc))
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope-producing handlers on an application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

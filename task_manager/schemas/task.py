"""Task schemas."""

from datetime import date, datetime
from typing import Any

from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError

from task_manager.models.enums import TaskPriority, TaskStatus
from task_manager.schemas.common import ApiModel, clean_text

STATUS_VALUES = tuple(s.value for s in TaskStatus)
PRIORITY_VALUES = tuple(p.value for p in TaskPriority)


def _check_title(value: Any, required: str) -> str | None:
    return clean_text(
        value,
        max_length=100,
        required=required,
        too_long="Title cannot be more than 100 characters",
    )


def _check_description(value: Any) -> str | None:
    return clean_text(
        value,
        max_length=500,
        too_long="Description cannot be more than 500 characters",
    )


def _check_status(value: Any) -> Any:
    if value not in STATUS_VALUES:
        raise PydanticCustomError(
            "enum", "Status must be one of: {choices}", {"choices": ", ".join(STATUS_VALUES)}
        )
    return value


def _check_priority(value: Any) -> Any:
    if value not in PRIORITY_VALUES:
        raise PydanticCustomError(
            "enum", "Priority must be one of: {choices}", {"choices": ", ".join(PRIORITY_VALUES)}
        )
    return value


def _parse_due_date(value: Any) -> date | None:
    """Accept an ISO 8601 date or datetime; only the calendar date is kept."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip()).date()
        except ValueError:
            pass
    raise PydanticCustomError("date", "Please provide a valid date in ISO format")


class TaskCreate(ApiModel):
    """Create a new task. Any owner field in the payload is ignored."""

    title: str = Field(None, validate_default=True)
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: date | None = None

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, value: Any) -> str | None:
        return _check_title(value, "Task title is required")

    @field_validator("description", mode="before")
    @classmethod
    def check_description(cls, value: Any) -> str | None:
        return _check_description(value)

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, value: Any) -> Any:
        return _check_status(value)

    @field_validator("priority", mode="before")
    @classmethod
    def check_priority(cls, value: Any) -> Any:
        return _check_priority(value)

    @field_validator("due_date", mode="before")
    @classmethod
    def check_due_date(cls, value: Any) -> date | None:
        return _parse_due_date(value)


class TaskUpdate(ApiModel):
    """Partial task update. Only fields present in the payload are applied."""

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: date | None = None

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, value: Any) -> str | None:
        return _check_title(value, "Task title cannot be empty")

    @field_validator("description", mode="before")
    @classmethod
    def check_description(cls, value: Any) -> str | None:
        return _check_description(value)

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, value: Any) -> Any:
        return _check_status(value)

    @field_validator("priority", mode="before")
    @classmethod
    def check_priority(cls, value: Any) -> Any:
        return _check_priority(value)

    @field_validator("due_date", mode="before")
    @classmethod
    def check_due_date(cls, value: Any) -> date | None:
        return _parse_due_date(value)


class TaskResponse(ApiModel):
    """Task response."""

    id: int
    owner_id: int
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    due_date: date | None
    created_at: datetime
    updated_at: datetime


class TaskStats(ApiModel):
    """Counts over the caller's tasks."""

    total: int
    by_status: dict[str, int]
    by_priority: dict[str, int]

"""Task API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Body, Path, Query, status

from task_manager.api.dependencies import CurrentUser, DbSession
from task_manager.errors import validate_payload
from task_manager.schemas.common import Envelope
from task_manager.schemas.task import TaskCreate, TaskResponse, TaskStats, TaskUpdate
from task_manager.services import tasks as task_service

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

# Ids outside the INTEGER column range cannot exist; they fail path validation (404)
TaskId = Annotated[int, Path(ge=1, le=2_147_483_647)]


@router.get("", response_model=Envelope[list[TaskResponse]])
def get_tasks(
    current_user: CurrentUser,
    db: DbSession,
    status_filter: str | None = Query(
        default=None, alias="status", description="Exact status match"
    ),
    priority: str | None = Query(default=None, description="Exact priority match"),
    search: str | None = Query(default=None, description="Search title and description"),
):
    """Get all tasks for the current user, newest first."""
    tasks = task_service.list_tasks(db, current_user, status_filter, priority, search)
    return Envelope(
        count=len(tasks),
        data=[TaskResponse.model_validate(t) for t in tasks],
    )


# Registered before /{task_id} so "stats" is not read as an id
@router.get("/stats", response_model=Envelope[TaskStats])
def get_task_stats(current_user: CurrentUser, db: DbSession):
    """Get task counts by status and priority."""
    return Envelope(data=TaskStats(**task_service.task_stats(db, current_user)))


@router.post("", response_model=Envelope[TaskResponse], status_code=status.HTTP_201_CREATED)
def create_task(
    current_user: CurrentUser,
    db: DbSession,
    task_data: Annotated[TaskCreate | None, Body()] = None,
):
    """Create a new task."""
    # A missing body is checked like an empty one so the title rule reports it
    if task_data is None:
        task_data = validate_payload(TaskCreate, {})
    task = task_service.create_task(db, current_user, task_data)
    return Envelope(message="Task created successfully", data=TaskResponse.model_validate(task))


@router.get("/{task_id}", response_model=Envelope[TaskResponse])
def get_task(task_id: TaskId, current_user: CurrentUser, db: DbSession):
    """Get a specific task."""
    task = task_service.get_owned_task(db, task_id, current_user)
    return Envelope(data=TaskResponse.model_validate(task))


@router.put("/{task_id}", response_model=Envelope[TaskResponse])
def update_task(
    task_id: TaskId,
    current_user: CurrentUser,
    db: DbSession,
    task_data: Annotated[TaskUpdate | None, Body()] = None,
):
    """Update a task. Only fields present in the body change."""
    if task_data is None:
        task_data = TaskUpdate()
    task = task_service.get_owned_task(db, task_id, current_user, action="update")
    task = task_service.update_task(db, task, task_data)
    return Envelope(message="Task updated successfully", data=TaskResponse.model_validate(task))


@router.delete("/{task_id}", response_model=Envelope[dict])
def delete_task(task_id: TaskId, current_user: CurrentUser, db: DbSession):
    """Delete a task."""
    task = task_service.get_owned_task(db, task_id, current_user, action="delete")
    task_service.delete_task(db, task)
    return Envelope(message="Task deleted successfully", data={})

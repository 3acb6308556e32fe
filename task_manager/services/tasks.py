"""Task store operations, scoped to a single owner."""

import logging
from enum import Enum
from typing import Any

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from task_manager.errors import Forbidden, NotFound, validate_payload
from task_manager.models.enums import TaskPriority, TaskStatus
from task_manager.models.task import Task
from task_manager.models.user import User
from task_manager.schemas.task import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

TASK_FIELDS = ("title", "description", "status", "priority", "due_date")


def _column_values(values: dict[str, Any]) -> dict[str, Any]:
    """Enums are stored by value."""
    return {k: v.value if isinstance(v, Enum) else v for k, v in values.items()}


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def get_owned_task(db: Session, task_id: int, user: User, action: str = "access") -> Task:
    """Get a task and check that the user owns it.

    A task that does not exist raises NotFound; a task owned by someone else
    raises Forbidden.
    """
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise NotFound("Task not found")

    if task.owner_id != user.id:
        logger.warning(f"User {user.id} tried to {action} task {task_id} owned by {task.owner_id}")
        raise Forbidden(f"Not authorized to {action} this task")

    return task


def list_tasks(
    db: Session,
    user: User,
    status: str | None = None,
    priority: str | None = None,
    search: str | None = None,
) -> list[Task]:
    """List the user's tasks, newest first, with optional filters."""
    query = db.query(Task).filter(Task.owner_id == user.id)

    if status:
        query = query.filter(Task.status == status)
    if priority:
        query = query.filter(Task.priority == priority)
    if search:
        pattern = f"%{_escape_like(search)}%"
        query = query.filter(
            or_(
                Task.title.ilike(pattern, escape="\\"),
                Task.description.ilike(pattern, escape="\\"),
            )
        )

    return query.order_by(Task.created_at.desc(), Task.id.desc()).all()


def create_task(db: Session, user: User, task_data: TaskCreate) -> Task:
    """Create a task owned by the user."""
    task = Task(owner_id=user.id, **_column_values(task_data.model_dump(include=set(TASK_FIELDS))))
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def update_task(db: Session, task: Task, task_data: TaskUpdate) -> Task:
    """Apply the supplied fields to a task.

    The merged record is validated against the same rules as a new task
    before anything is written.
    """
    changes = task_data.model_dump(exclude_unset=True)
    merged = {field: getattr(task, field) for field in TASK_FIELDS}
    merged.update(changes)
    validate_payload(TaskCreate, merged)

    for field, value in _column_values(changes).items():
        setattr(task, field, value)

    db.commit()
    db.refresh(task)
    return task


def delete_task(db: Session, task: Task) -> None:
    """Permanently remove a task."""
    db.delete(task)
    db.commit()


def task_stats(db: Session, user: User) -> dict[str, Any]:
    """Count the user's tasks in total, by status and by priority.

    Every status and priority key is present, defaulting to 0.
    """
    by_status = dict.fromkeys((s.value for s in TaskStatus), 0)
    by_priority = dict.fromkeys((p.value for p in TaskPriority), 0)

    rows = (
        db.query(Task.status, Task.priority, func.count(Task.id))
        .filter(Task.owner_id == user.id)
        .group_by(Task.status, Task.priority)
        .all()
    )

    total = 0
    for status, priority, count in rows:
        total += count
        by_status[status] = by_status.get(status, 0) + count
        by_priority[priority] = by_priority.get(priority, 0) + count

    return {"total": total, "by_status": by_status, "by_priority": by_priority}

"""Enums for model fields."""

from enum import Enum


class TaskStatus(str, Enum):
    """Workflow state of a task. Any transition is allowed."""

    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    DONE = "Done"


class TaskPriority(str, Enum):
    """Priority levels for tasks."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

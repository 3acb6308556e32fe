"""Pydantic schemas for API requests and responses."""

from task_manager.schemas.auth import AuthData, UserLogin, UserRegister, UserResponse
from task_manager.schemas.common import Envelope
from task_manager.schemas.task import TaskCreate, TaskResponse, TaskStats, TaskUpdate

__all__ = [
    "Envelope",
    "UserRegister",
    "UserLogin",
    "AuthData",
    "UserResponse",
    "TaskCreate",
    "TaskUpdate",
    "TaskResponse",
    "TaskStats",
]

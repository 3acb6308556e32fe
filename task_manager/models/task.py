"""Task model."""

from sqlalchemy import Column, Date, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from task_manager.database import Base
from task_manager.models.enums import TaskPriority, TaskStatus
from task_manager.models.mixins import TimestampMixin


class Task(Base, TimestampMixin):
    """A task owned by exactly one user."""

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    status = Column(String(20), nullable=False, default=TaskStatus.TODO.value, index=True)
    priority = Column(String(20), nullable=False, default=TaskPriority.MEDIUM.value, index=True)
    due_date = Column(Date, nullable=True)

    # Relationships
    owner = relationship("User", back_populates="tasks")

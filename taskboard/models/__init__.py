"""SQLAlchemy models for Taskboard."""

from .base import Base, utc_now
from .project import DEFAULT_COLOR, Project
from .tag import Tag
from .task import Task, TaskPriority, TaskStatus
from .task_tag import TaskTag

__all__ = [
    "Base",
    "utc_now",
    "DEFAULT_COLOR",
    "Project",
    "Tag",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "TaskTag",
]

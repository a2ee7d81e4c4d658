"""Repository layer for database operations."""

from .base import BaseRepository
from .project import ProjectRepository
from .tag import TagRepository
from .task import TaskRepository

__all__ = [
    "BaseRepository",
    "ProjectRepository",
    "TaskRepository",
    "TagRepository",
]

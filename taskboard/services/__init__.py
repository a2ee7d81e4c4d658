"""Service layer with business logic."""

from .project import ProjectService
from .seed import seed_database
from .tag import TagService
from .task import TaskService

__all__ = [
    "ProjectService",
    "TaskService",
    "TagService",
    "seed_database",
]

"""Core application components."""

from .config import ProjectDeletePolicy, Settings, settings
from .database import AsyncSessionLocal, drop_db, engine, get_db, init_db
from .exceptions import (
    ConflictError,
    NotFoundError,
    TaskboardError,
    UpstreamError,
    ValidationError,
)

__all__ = [
    "settings",
    "Settings",
    "ProjectDeletePolicy",
    "engine",
    "AsyncSessionLocal",
    "get_db",
    "init_db",
    "drop_db",
    "TaskboardError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "UpstreamError",
]

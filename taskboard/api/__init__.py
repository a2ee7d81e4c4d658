"""API layer - FastAPI endpoints."""

from fastapi import APIRouter, Depends

from .ai import router as ai_router
from .dependencies import verify_api_key
from .projects import router as projects_router
from .tags import router as tags_router
from .tasks import router as tasks_router

api_router = APIRouter(prefix="/api", dependencies=[Depends(verify_api_key)])
api_router.include_router(tasks_router)
api_router.include_router(projects_router)
api_router.include_router(tags_router)
api_router.include_router(ai_router)

__all__ = [
    "api_router",
    "tasks_router",
    "projects_router",
    "tags_router",
    "ai_router",
]

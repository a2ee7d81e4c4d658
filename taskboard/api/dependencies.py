"""
Dependencies для FastAPI endpoints.

Цепочка зависимостей:
    get_task_service зависит от get_db
    → FastAPI вызовет get_db() (одна сессия = одна транзакция)
    → передаст сессию в get_task_service()
    → вернёт TaskService в endpoint

В тестах get_db и get_ai_assistant подменяются через
app.dependency_overrides.
"""

from functools import lru_cache

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.database import get_db
from ..integrations.ai import AIAssistant, OpenAIAssistant
from ..services import ProjectService, TagService, TaskService

__all__ = [
    "get_db",
    "verify_api_key",
    "get_task_service",
    "get_project_service",
    "get_tag_service",
    "get_ai_assistant",
]

# ============================================================================
# API KEY AUTHENTICATION
# ============================================================================

api_key_header = APIKeyHeader(
    name="X-API-Key",
    auto_error=False,  # сами решаем, нужен ли ключ
    description="API ключ. Требуется только если задан API_KEY в настройках",
)


async def verify_api_key(api_key: str | None = Depends(api_key_header)) -> str | None:
    """
    Dependency для проверки API ключа.

    Если settings.API_KEY не задан - авторизация отключена.

    Пример запроса:
        curl -H "X-API-Key: your-secret-key" http://localhost:8000/api/tasks
    """
    if settings.API_KEY is None:
        return None

    if api_key is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API key is missing. Add header: X-API-Key: your-key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    if api_key != settings.API_KEY:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    return api_key


# ============================================================================
# SERVICE DEPENDENCIES
# ============================================================================


async def get_task_service(db: AsyncSession = Depends(get_db)) -> TaskService:
    """Dependency для TaskService."""
    return TaskService(db)


async def get_project_service(db: AsyncSession = Depends(get_db)) -> ProjectService:
    """Dependency для ProjectService (политика удаления из настроек)."""
    return ProjectService(db)


async def get_tag_service(db: AsyncSession = Depends(get_db)) -> TagService:
    """Dependency для TagService."""
    return TagService(db)


@lru_cache
def get_ai_assistant() -> AIAssistant:
    """
    Dependency для AI ассистента.

    Клиент создаётся один раз на процесс. Без OPENAI_API_KEY
    запросы к AI завершаются UpstreamError (500).
    """
    return OpenAIAssistant(
        api_key=settings.OPENAI_API_KEY,
        model=settings.AI_MODEL,
        base_url=settings.OPENAI_BASE_URL,
    )

"""
Главный файл FastAPI приложения.

Запуск:
    uvicorn taskboard.main:app --reload

API документация:
    http://localhost:8000/docs       - Swagger UI
    http://localhost:8000/redoc      - ReDoc
"""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from . import __version__
from .api import api_router
from .api.errors import register_error_handlers
from .api.middleware import RequestLoggingMiddleware
from .core.config import settings
from .core.database import AsyncSessionLocal, get_db, init_db
from .core.logging import get_logger, setup_logging
from .services import seed_database

# LOG_LEVEL: DEBUG/INFO/WARNING/ERROR
# LOG_FORMAT: json (production) / simple (development)
setup_logging(
    log_level=settings.LOG_LEVEL,
    log_format=settings.LOG_FORMAT,
    sql_echo=settings.DATABASE_ECHO,
)

logger = get_logger(__name__)

APP_START_TIME: float = 0.0

# ============================================================================
# RATE LIMITER SETUP
# ============================================================================

# Группируем запросы по IP адресу
limiter = Limiter(key_func=get_remote_address)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Превышение лимита запросов в едином формате ошибки."""
    return JSONResponse(
        status_code=429,
        content={"message": f"Rate limit exceeded: {exc.detail}"},
    )


# ============================================================================
# LIFESPAN EVENT HANDLER
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: создание таблиц и демо-данные (по настройкам)
    Shutdown: лог с uptime
    """
    global APP_START_TIME
    APP_START_TIME = time.time()

    if settings.CREATE_TABLES_ON_STARTUP:
        await init_db()

    if settings.SEED_ON_STARTUP:
        async with AsyncSessionLocal() as session:
            seeded = await seed_database(session)
            await session.commit()
        logger.info("Seed finished", extra={"seeded": seeded})

    logger.info(
        "Application started",
        extra={
            "app_name": settings.APP_NAME,
            "version": __version__,
            "debug": settings.DEBUG,
            "delete_policy": settings.PROJECT_DELETE_POLICY.value,
            "auth_enabled": settings.API_KEY is not None,
        },
    )

    yield

    uptime = int(time.time() - APP_START_TIME)
    logger.info("Application stopped", extra={"uptime_seconds": uptime})


# ============================================================================
# CREATE APPLICATION
# ============================================================================

app = FastAPI(
    lifespan=lifespan,
    title=settings.APP_NAME,
    description="""
    Персональный task manager с AI ассистентом.

    ## Возможности

    * **Задачи** - CRUD, фильтры, поиск, подзадачи, быстрое добавление
    * **Проекты** - группировка задач
    * **Теги** - многие-ко-многим с задачами
    * **AI** - извлечение задач из текста и разбиение на подзадачи

    ## Архитектура

    ```
    API Layer (FastAPI) → Service Layer → Repository Layer (SQLAlchemy)
    ```

    ## Формат ошибок

    ```json
    {"message": "...", "field": "tagIds.1"}
    ```
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.state.limiter = limiter
# slowapi handler имеет специфичный тип, но работает корректно
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Каждый запрос логируется с методом, путём, статусом и временем
app.add_middleware(RequestLoggingMiddleware)

# /api/tasks, /api/projects, /api/tags, /api/ai
app.include_router(api_router)

register_error_handlers(app)


# ============================================================================
# ROOT ENDPOINT
# ============================================================================


@app.get("/", tags=["root"], summary="Root endpoint", description="Информация о API")
@limiter.limit(settings.RATE_LIMIT)
async def root(request: Request):
    return {
        "name": settings.APP_NAME,
        "version": __version__,
        "docs": "/docs",
        "redoc": "/redoc",
        "openapi": "/openapi.json",
        "endpoints": {
            "tasks": "/api/tasks",
            "projects": "/api/projects",
            "tags": "/api/tags",
            "ai": "/api/ai",
        },
        "rate_limit": settings.RATE_LIMIT,
    }


# ============================================================================
# HEALTH CHECK
# ============================================================================


@app.get(
    "/health", tags=["health"], summary="Health check", description="Проверка работоспособности API"
)
@limiter.limit(settings.RATE_LIMIT)
async def health_check(request: Request, db: AsyncSession = Depends(get_db)):
    """
    Проверяет подключение к базе данных.

    Пример ответа (200 OK):
    ```json
    {
        "status": "ok",
        "checks": {"database": "connected", "version": "1.0.0", "uptime_seconds": 3600},
        "timestamp": "2026-10-19T12:00:00+00:00"
    }
    ```

    При недоступной БД - 503 и "database": "disconnected".
    """
    uptime_seconds = int(time.time() - APP_START_TIME) if APP_START_TIME > 0 else 0

    db_status = "disconnected"
    try:
        await db.execute(text("SELECT 1"))
        db_status = "connected"
    except SQLAlchemyError as e:
        logger.error("Health check failed", extra={"error": str(e)})

    overall_status = "ok" if db_status == "connected" else "error"
    return JSONResponse(
        status_code=200 if overall_status == "ok" else 503,
        content={
            "status": overall_status,
            "checks": {
                "database": db_status,
                "version": __version__,
                "uptime_seconds": uptime_seconds,
            },
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )

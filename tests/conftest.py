"""
Pytest fixtures для тестов.

Предоставляет:
- test_engine: изолированная SQLite in-memory БД для каждого теста
- test_db: сессия для тестов сервисов и репозиториев
- fake_assistant: подмена AI ассистента без сети
- test_client: HTTP клиент для тестирования API endpoints
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from taskboard.api.dependencies import get_ai_assistant, get_db
from taskboard.core.exceptions import UpstreamError
from taskboard.main import app
from taskboard.models import Base
from taskboard.schemas import AIProcessResponse

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeAssistant:
    """
    AIAssistant без сети: возвращает заранее заданные ответы
    и запоминает аргументы вызовов.
    """

    def __init__(self):
        self.extraction = AIProcessResponse(tasks=[])
        self.subtasks: list[str] = []
        self.error: UpstreamError | None = None
        self.calls: list[tuple] = []

    async def extract_tasks(self, text: str) -> AIProcessResponse:
        self.calls.append(("extract_tasks", text))
        if self.error:
            raise self.error
        return self.extraction

    async def breakdown(self, title: str, description: str | None) -> list[str]:
        self.calls.append(("breakdown", title, description))
        if self.error:
            raise self.error
        return self.subtasks


@pytest_asyncio.fixture
async def test_engine():
    """
    Создаёт async engine для тестовой БД (SQLite in-memory).

    StaticPool - одно и то же соединение, иначе in-memory данные теряются.
    Таблицы создаются для каждого теста заново.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(test_engine):
    """Async session для тестов сервисов; изменения откатываются после теста."""
    TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()


@pytest.fixture
def fake_assistant():
    return FakeAssistant()


@pytest_asyncio.fixture
async def test_client(test_engine, fake_assistant):
    """
    HTTP клиент для API endpoints.

    get_db смотрит в тестовую БД (одна транзакция на запрос),
    get_ai_assistant возвращает FakeAssistant.
    """
    TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with TestSessionLocal() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_assistant] = lambda: fake_assistant

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def anyio_backend():
    """Используем asyncio для всех async тестов."""
    return "asyncio"

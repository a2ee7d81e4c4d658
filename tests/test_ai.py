"""
Тесты для AI ассистента.

Проверяем:
- Разбор JSON ответа модели в черновики задач
- Преобразование любых сбоев в UpstreamError
- Endpoints /api/ai/* с подменённым ассистентом
"""

from datetime import datetime
from types import SimpleNamespace

import openai
import pytest
from httpx import AsyncClient

from taskboard.core.exceptions import UpstreamError
from taskboard.integrations.ai import OpenAIAssistant
from taskboard.models import TaskPriority
from taskboard.schemas import AIProcessResponse, TaskDraft


class FakeCompletions:
    """Подмена client.chat.completions: отдаёт content или бросает error."""

    def __init__(self, content: str | None = None, error: Exception | None = None):
        self.content = content
        self.error = error
        self.kwargs: dict = {}

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_assistant(content: str | None = None, error: Exception | None = None):
    completions = FakeCompletions(content=content, error=error)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAIAssistant(api_key=None, model="test-model", client=client), completions


# ============================================================================
# OPENAI ASSISTANT
# ============================================================================


@pytest.mark.asyncio
async def test_extract_tasks():
    """Test: ответ модели превращается в черновики, лишние ключи игнорируются."""
    assistant, completions = make_assistant(
        '{"tasks": [{"title": "Call mom", "priority": "high", '
        '"dueDate": "2026-10-20T09:00:00Z", "confidence": 0.9}, {"title": "Buy groceries"}], '
        '"suggestedProject": "Personal"}'
    )

    result = await assistant.extract_tasks("Call mom tomorrow, buy groceries")

    assert [t.title for t in result.tasks] == ["Call mom", "Buy groceries"]
    assert result.tasks[0].priority == TaskPriority.HIGH
    assert result.tasks[0].due_date == datetime(2026, 10, 20, 9, 0)
    assert result.suggested_project == "Personal"

    assert completions.kwargs["model"] == "test-model"
    assert completions.kwargs["response_format"] == {"type": "json_object"}
    assert completions.kwargs["messages"][1]["content"] == "Call mom tomorrow, buy groceries"


@pytest.mark.asyncio
async def test_breakdown():
    assistant, completions = make_assistant('{"subtasks": ["Outline", "Draft", "Review"]}')

    subtasks = await assistant.breakdown("Write report", None)

    assert subtasks == ["Outline", "Draft", "Review"]
    assert "Write report" in completions.kwargs["messages"][1]["content"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "content, error, message",
    [
        (None, openai.OpenAIError("connection reset"), "AI service request failed"),
        ("", None, "AI service returned an empty response"),
        ("not json", None, "AI service returned invalid JSON"),
        ("[1, 2]", None, "AI service returned an unexpected payload"),
        ('{"tasks": [{"priority": "high"}]}', None, "AI service returned malformed tasks"),
    ],
)
async def test_extract_tasks_failures(content, error, message):
    """Test: любой сбой - UpstreamError, без повторов."""
    assistant, _ = make_assistant(content=content, error=error)

    with pytest.raises(UpstreamError) as exc_info:
        await assistant.extract_tasks("anything")

    assert exc_info.value.message == message


@pytest.mark.asyncio
async def test_breakdown_malformed():
    assistant, _ = make_assistant('{"steps": ["a"]}')

    with pytest.raises(UpstreamError, match="malformed subtasks"):
        await assistant.breakdown("Write report", "Q3")


@pytest.mark.asyncio
async def test_not_configured():
    assistant = OpenAIAssistant(api_key=None, model="test-model")

    with pytest.raises(UpstreamError, match="not configured"):
        await assistant.extract_tasks("anything")


# ============================================================================
# AI ENDPOINTS
# ============================================================================


@pytest.mark.asyncio
async def test_process_endpoint_returns_drafts(test_client: AsyncClient, fake_assistant):
    """Test: POST /api/ai/process - черновики, ничего не сохраняется."""
    fake_assistant.extraction = AIProcessResponse(
        tasks=[TaskDraft(title="Call mom", priority=TaskPriority.HIGH)],
        suggested_project="Personal",
    )

    response = await test_client.post("/api/ai/process", json={"prompt": "Call mom"})

    assert response.status_code == 200
    data = response.json()
    assert data["suggestedProject"] == "Personal"
    assert data["tasks"][0]["title"] == "Call mom"
    assert data["tasks"][0]["priority"] == "high"
    assert fake_assistant.calls == [("extract_tasks", "Call mom")]

    tasks = await test_client.get("/api/tasks")
    assert tasks.json() == []


@pytest.mark.asyncio
async def test_process_endpoint_upstream_error(test_client: AsyncClient, fake_assistant):
    """Test: UpstreamError -> 500 с безопасным сообщением, detail не утекает."""
    fake_assistant.error = UpstreamError("AI service request failed", detail="secret stack")

    response = await test_client.post("/api/ai/process", json={"prompt": "Call mom"})

    assert response.status_code == 500
    assert response.json() == {"message": "AI service request failed"}


@pytest.mark.asyncio
async def test_process_endpoint_requires_prompt(test_client: AsyncClient):
    response = await test_client.post("/api/ai/process", json={})

    assert response.status_code == 400
    assert response.json()["field"] == "prompt"


@pytest.mark.asyncio
async def test_breakdown_endpoint(test_client: AsyncClient, fake_assistant):
    fake_assistant.subtasks = ["Outline", "Draft"]
    created = await test_client.post(
        "/api/tasks", json={"title": "Write report", "description": "Q3 numbers"}
    )

    response = await test_client.post("/api/ai/breakdown", json={"taskId": created.json()["id"]})

    assert response.status_code == 200
    assert response.json() == {"subtasks": ["Outline", "Draft"]}
    assert fake_assistant.calls == [("breakdown", "Write report", "Q3 numbers")]


@pytest.mark.asyncio
async def test_breakdown_endpoint_missing_task(test_client: AsyncClient, fake_assistant):
    response = await test_client.post("/api/ai/breakdown", json={"taskId": 999})

    assert response.status_code == 404
    assert response.json() == {"message": "Task not found"}
    assert fake_assistant.calls == []

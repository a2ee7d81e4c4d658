"""AI assistant interface and the OpenAI-compatible implementation."""

import json
from typing import Any, Protocol

import openai
from openai import AsyncOpenAI
from pydantic import ValidationError as PydanticValidationError

from ...core.exceptions import UpstreamError
from ...core.logging import get_logger
from ...schemas import AIBreakdownResponse, AIProcessResponse

logger = get_logger(__name__)

EXTRACT_SYSTEM_PROMPT = """You are a productivity assistant. Extract tasks from the user's natural language input.
Return a JSON object with a "tasks" array and an optional "suggestedProject" string.
Each task has:
- title: string
- description: string (optional)
- priority: "low" | "medium" | "high" (infer from context, default "medium")
- dueDate: ISO 8601 string (optional, infer from "tomorrow", "next week", etc.)

Example input: "Finish the report by Friday and email John"
Example output: {"tasks": [{"title": "Finish report", "dueDate": "2026-10-23T00:00:00Z"}, {"title": "Email John"}]}"""

BREAKDOWN_SYSTEM_PROMPT = (
    "Break down the following task into 3-5 smaller, actionable subtasks. "
    'Return a JSON object with a "subtasks" array of strings.'
)


class AIAssistant(Protocol):
    """
    Внешний AI-сервис как чёрный ящик.

    Любая ошибка (сеть, пустой или битый ответ, неверная форма)
    выбрасывается как UpstreamError; повторов нет.
    """

    async def extract_tasks(self, text: str) -> AIProcessResponse: ...

    async def breakdown(self, title: str, description: str | None) -> list[str]: ...


class OpenAIAssistant:
    """
    AIAssistant поверх OpenAI-совместимого Chat Completions API.

    Ответ запрашивается в JSON-режиме и проверяется только по форме
    (pydantic схемы), без исправления.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str,
        base_url: str | None = None,
        client: AsyncOpenAI | None = None,
    ):
        self.model = model
        if client is not None:
            self._client: AsyncOpenAI | None = client
        elif api_key:
            # max_retries=0: каждый запрос выполняется ровно один раз
            self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0)
        else:
            self._client = None

    async def extract_tasks(self, text: str) -> AIProcessResponse:
        """Извлечь черновики задач из свободного текста."""
        data = await self._complete_json(EXTRACT_SYSTEM_PROMPT, text)
        try:
            return AIProcessResponse.model_validate(data)
        except PydanticValidationError as exc:
            raise UpstreamError("AI service returned malformed tasks", detail=str(exc)) from exc

    async def breakdown(self, title: str, description: str | None) -> list[str]:
        """Разбить задачу на 3-5 подзадач (строки)."""
        user_content = f"Task: {title}\nDescription: {description or 'No description'}"
        data = await self._complete_json(BREAKDOWN_SYSTEM_PROMPT, user_content)
        try:
            return AIBreakdownResponse.model_validate(data).subtasks
        except PydanticValidationError as exc:
            raise UpstreamError("AI service returned malformed subtasks", detail=str(exc)) from exc

    async def _complete_json(self, system_prompt: str, user_content: str) -> dict[str, Any]:
        """Один запрос к модели в JSON-режиме; результат - JSON объект."""
        if self._client is None:
            raise UpstreamError("AI service is not configured", detail="OPENAI_API_KEY is not set")

        try:
            completion = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_content},
                ],
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as exc:
            raise UpstreamError("AI service request failed", detail=repr(exc)) from exc

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise UpstreamError("AI service returned an empty response")

        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise UpstreamError("AI service returned invalid JSON", detail=str(exc)) from exc

        if not isinstance(data, dict):
            raise UpstreamError("AI service returned an unexpected payload", detail=content[:200])

        logger.debug("AI completion received", extra={"model": self.model, "keys": sorted(data)})
        return data

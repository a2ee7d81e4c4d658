"""
API endpoints AI ассистента.

Ничего не сохраняют: клиент сам решает, какие черновики создать
через POST /api/tasks.
"""

from fastapi import APIRouter, Depends

from ..core.logging import get_logger
from ..integrations.ai import AIAssistant
from ..schemas import (
    AIBreakdownRequest,
    AIBreakdownResponse,
    AIProcessRequest,
    AIProcessResponse,
    ErrorResponse,
)
from ..services import TaskService
from .dependencies import get_ai_assistant, get_task_service

logger = get_logger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post(
    "/process",
    response_model=AIProcessResponse,
    response_model_exclude_none=True,
    summary="Извлечь задачи из текста",
    responses={500: {"model": ErrorResponse, "description": "Ошибка AI сервиса"}},
)
async def process_prompt(
    data: AIProcessRequest, assistant: AIAssistant = Depends(get_ai_assistant)
) -> AIProcessResponse:
    """
    Пример запроса:
    ```json
    {"prompt": "Call mom tomorrow, buy groceries"}
    ```
    """
    result = await assistant.extract_tasks(data.prompt)
    logger.info("Tasks extracted", extra={"draft_count": len(result.tasks)})
    return result


@router.post(
    "/breakdown",
    response_model=AIBreakdownResponse,
    summary="Разбить задачу на подзадачи",
    responses={
        404: {"model": ErrorResponse, "description": "Задача не найдена"},
        500: {"model": ErrorResponse, "description": "Ошибка AI сервиса"},
    },
)
async def breakdown_task(
    data: AIBreakdownRequest,
    service: TaskService = Depends(get_task_service),
    assistant: AIAssistant = Depends(get_ai_assistant),
) -> AIBreakdownResponse:
    task = await service.require_task(data.task_id)
    subtasks = await assistant.breakdown(task.title, task.description)
    logger.info("Task broken down", extra={"task_id": task.id, "subtask_count": len(subtasks)})
    return AIBreakdownResponse(subtasks=subtasks)

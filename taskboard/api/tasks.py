"""
API endpoints для работы с задачами.

- CRUD операции (PATCH-семантика обновления)
- Управление тегами задачи (tagIds заменяет набор целиком)
- Фильтрация и поиск
- Быстрое добавление из фразы (quick-add)
"""

from fastapi import APIRouter, Depends, Query, status

from ..models import TaskStatus
from ..schemas import (
    ErrorResponse,
    QuickAddRequest,
    TagResponse,
    TaskCreateRequest,
    TaskResponse,
    TaskUpdateRequest,
)
from ..services import TaskService
from .dependencies import get_task_service

router = APIRouter(prefix="/tasks", tags=["tasks"])


def parse_project_id(value: str | None) -> int | None:
    """
    projectId приходит строкой; нечисловое значение = фильтр не задан.

    "7" -> 7, "abc" -> None, "" -> None
    """
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def parse_status(value: str | None) -> TaskStatus | None:
    """Неизвестный статус = фильтр не задан."""
    if not value:
        return None
    try:
        return TaskStatus(value)
    except ValueError:
        return None


# ============================================================================
# LIST / SEARCH TASKS
# ============================================================================


@router.get(
    "",
    response_model=list[TaskResponse],
    summary="Список задач с фильтрами",
    description="""
    Получить задачи, новые сверху.

    Фильтры (все опциональные, комбинируются через AND):
    - projectId: задачи проекта
    - status: todo / in_progress / completed / archived
    - search: подстрока в названии (без учёта регистра)
    """,
)
async def list_tasks(
    project_id: str | None = Query(None, alias="projectId", description="ID проекта"),
    status_filter: str | None = Query(None, alias="status", description="Статус задачи"),
    search: str | None = Query(None, description="Поиск по названию"),
    service: TaskService = Depends(get_task_service),
) -> list[TaskResponse]:
    """
    Примеры:
        GET /api/tasks?projectId=1
        GET /api/tasks?status=todo&search=report
    """
    tasks = await service.list_tasks(
        project_id=parse_project_id(project_id),
        status=parse_status(status_filter),
        search=search or None,
    )
    return [TaskResponse.model_validate(t) for t in tasks]


# ============================================================================
# QUICK ADD
# ============================================================================


@router.post(
    "/quick-add",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Быстро добавить задачу из фразы",
    responses={400: {"model": ErrorResponse, "description": "Пустое название"}},
)
async def quick_add_task(
    data: QuickAddRequest, service: TaskService = Depends(get_task_service)
) -> TaskResponse:
    """
    "Finish DBMS notes tomorrow" -> задача "Finish DBMS notes" с дедлайном завтра.

    Поддерживаются ключевые слова today / tomorrow.
    """
    task = await service.quick_add(data.text, project_id=data.project_id, priority=data.priority)
    return TaskResponse.model_validate(task)


# ============================================================================
# GET TASK
# ============================================================================


@router.get(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Получить задачу по ID",
    responses={404: {"model": ErrorResponse, "description": "Задача не найдена"}},
)
async def get_task(task_id: int, service: TaskService = Depends(get_task_service)) -> TaskResponse:
    task = await service.require_task(task_id)
    return TaskResponse.model_validate(task)


@router.get(
    "/{task_id}/tags",
    response_model=list[TagResponse],
    summary="Теги задачи",
    responses={404: {"model": ErrorResponse, "description": "Задача не найдена"}},
)
async def get_task_tags(
    task_id: int, service: TaskService = Depends(get_task_service)
) -> list[TagResponse]:
    """Теги в порядке привязки."""
    await service.require_task(task_id)
    tags = await service.get_task_tags(task_id)
    return [TagResponse.model_validate(t) for t in tags]


# ============================================================================
# CREATE TASK
# ============================================================================


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Создать задачу",
    description="""
    Создать новую задачу и привязать теги.

    - title обязателен, priority/status из фиксированных наборов
    - id и createdAt генерирует сервер (передавать нельзя)
    - существование projectId, parentId и tagIds не проверяется
    """,
    responses={
        201: {"description": "Задача создана"},
        400: {"model": ErrorResponse, "description": "Ошибка валидации"},
    },
)
async def create_task(
    data: TaskCreateRequest, service: TaskService = Depends(get_task_service)
) -> TaskResponse:
    """
    Пример запроса:
    ```json
    {
        "title": "Buy milk",
        "priority": "low",
        "projectId": 2,
        "tagIds": [1, 3]
    }
    ```
    """
    task = await service.create_task(data.task_fields(), tag_ids=data.tag_ids)
    return TaskResponse.model_validate(task)


# ============================================================================
# UPDATE TASK
# ============================================================================


@router.patch(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Обновить задачу",
    description="""
    Частичное обновление: меняются только присланные поля.

    tagIds (если прислан) заменяет набор тегов целиком, [] снимает все теги.
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Ошибка валидации"},
        404: {"model": ErrorResponse, "description": "Задача не найдена"},
    },
)
async def update_task(
    task_id: int,
    data: TaskUpdateRequest,
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    tag_ids = data.tag_ids if "tag_ids" in data.model_fields_set else None
    task = await service.update_task(task_id, data.task_fields(), tag_ids=tag_ids)
    return TaskResponse.model_validate(task)


# ============================================================================
# DELETE TASK
# ============================================================================


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удалить задачу",
    description="Удаляет задачу и её связи с тегами. Удаление несуществующей задачи - 204.",
)
async def delete_task(task_id: int, service: TaskService = Depends(get_task_service)) -> None:
    await service.delete_task(task_id)

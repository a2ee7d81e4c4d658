"""
Pydantic схемы - контракт API.

DTOs (Data Transfer Objects) для передачи данных через HTTP.
Единый источник истины для формата запросов и ответов:
- JSON в camelCase (dueDate, projectId, tagIds), атрибуты Python в snake_case
- *Insert схемы: полная валидация, сгенерированные поля (id, createdAt) запрещены
- *Update схемы: все поля опциональны, но присланные проверяются как при создании
- *Response схемы: создаются из SQLAlchemy моделей (from_attributes)
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator
from pydantic.alias_generators import to_camel

from .models import DEFAULT_COLOR, TaskPriority, TaskStatus


def reject_null(value: Any) -> Any:
    """Явный null допустим только для nullable полей."""
    if value is None:
        raise ValueError("Field cannot be null")
    return value


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Привести datetime с таймзоной к naive UTC (колонки без TZ)."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(UTC).replace(tzinfo=None)
    return value


class CamelModel(BaseModel):
    """Базовая схема: camelCase в JSON, snake_case в Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StrictInput(CamelModel):
    """Входные данные: неизвестные и сгенерированные поля запрещены."""

    model_config = ConfigDict(extra="forbid")


# ============================================================================
# PROJECT SCHEMAS
# ============================================================================


class ProjectInsert(StrictInput):
    """
    Схема для создания проекта (POST /api/projects).

    Пример запроса:
    {
        "name": "Work",
        "slug": "work",
        "color": "#3b82f6"
    }
    """

    name: str = Field(..., min_length=1, description="Название проекта")
    slug: str = Field(..., min_length=1, description="Уникальный идентификатор для URL")
    color: str = Field(DEFAULT_COLOR, description="Цвет (формат не проверяется)")


class ProjectUpdate(StrictInput):
    """Частичное обновление проекта. Все поля опциональные."""

    name: str | None = Field(None, min_length=1)
    slug: str | None = Field(None, min_length=1)
    color: str | None = None

    @field_validator("name", "slug", "color", mode="before")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        return reject_null(value)


class ProjectResponse(CamelModel):
    """Проект в ответе API."""

    id: int
    name: str
    slug: str
    color: str

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# TAG SCHEMAS
# ============================================================================


class TagInsert(StrictInput):
    """
    Схема для создания тега (POST /api/tags).

    Пример:
    {
        "name": "Urgent",
        "color": "#ef4444"
    }
    """

    name: str = Field(..., min_length=1, description="Уникальное название тега")
    color: str = Field(DEFAULT_COLOR, description="Цвет (формат не проверяется)")


class TagUpdate(StrictInput):
    """Частичное обновление тега."""

    name: str | None = Field(None, min_length=1)
    color: str | None = None

    @field_validator("name", "color", mode="before")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        return reject_null(value)


class TagResponse(CamelModel):
    """Тег в ответе API."""

    id: int
    name: str
    color: str

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# TASK SCHEMAS
# ============================================================================


class TaskInsert(StrictInput):
    """
    Поля задачи при создании.

    id и createdAt генерирует сервер, передавать их нельзя.
    Целые поля строгие: "7" не приводится к 7. Даты и enum принимаются строками.
    """

    title: str = Field(..., min_length=1, description="Название задачи")
    description: str | None = Field(None, description="Описание задачи")
    priority: TaskPriority = Field(TaskPriority.MEDIUM, description="Приоритет: low/medium/high")
    status: TaskStatus = Field(TaskStatus.TODO, description="Статус задачи")
    due_date: datetime | None = Field(None, description="Дедлайн (ISO 8601)")
    project_id: StrictInt | None = Field(None, description="ID проекта")
    position: StrictInt = Field(0, description="Позиция для ручной сортировки")
    parent_id: StrictInt | None = Field(None, description="ID родительской задачи (для подзадач)")

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, value: datetime | None) -> datetime | None:
        return to_naive_utc(value)


class TaskUpdate(StrictInput):
    """
    Поля задачи при частичном обновлении (PATCH).

    Меняются только присланные поля (model_fields_set).
    """

    title: str | None = Field(None, min_length=1)
    description: str | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    due_date: datetime | None = None
    project_id: StrictInt | None = None
    position: StrictInt | None = None
    parent_id: StrictInt | None = None

    @field_validator("title", "priority", "status", "position", mode="before")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        return reject_null(value)

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, value: datetime | None) -> datetime | None:
        return to_naive_utc(value)

    def changes(self) -> dict[str, Any]:
        """Только явно переданные поля (для PATCH)."""
        return self.model_dump(exclude_unset=True)


class TagIdsMixin(CamelModel):
    """
    Необязательный список тегов.

    Отсутствует -> связи не трогаем; [] -> снять все теги.
    """

    tag_ids: list[StrictInt] | None = Field(None, description="ID тегов (заменяет набор целиком)")

    @field_validator("tag_ids", mode="before")
    @classmethod
    def tag_ids_not_null(cls, value: Any) -> Any:
        return reject_null(value)


class TaskCreateRequest(TaskInsert, TagIdsMixin):
    """
    Тело POST /api/tasks.

    Пример запроса:
    {
        "title": "Buy milk",
        "priority": "low",
        "projectId": 2,
        "tagIds": [1, 3]
    }
    """

    def task_fields(self) -> TaskInsert:
        return TaskInsert.model_validate(self.model_dump(exclude={"tag_ids"}))


class TaskUpdateRequest(TaskUpdate, TagIdsMixin):
    """
    Тело PATCH /api/tasks/{id}.

    Пример запроса:
    {
        "status": "completed",
        "tagIds": []
    }
    """

    def task_fields(self) -> TaskUpdate:
        return TaskUpdate.model_validate(self.model_dump(exclude_unset=True, exclude={"tag_ids"}))


class TaskResponse(CamelModel):
    """
    Задача в ответе API.

    Пример ответа:
    {
        "id": 1,
        "title": "Buy milk",
        "description": null,
        "priority": "low",
        "status": "todo",
        "dueDate": null,
        "projectId": null,
        "position": 0,
        "parentId": null,
        "createdAt": "2026-10-19T12:00:00"
    }
    """

    id: int
    title: str
    description: str | None
    priority: TaskPriority
    status: TaskStatus
    due_date: datetime | None
    project_id: int | None
    position: int
    parent_id: int | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class QuickAddRequest(StrictInput):
    """
    Тело POST /api/tasks/quick-add.

    Пример:
    {
        "text": "Finish DBMS notes tomorrow",
        "projectId": 1
    }
    """

    text: str = Field(..., min_length=1, description="Текст задачи на естественном языке")
    project_id: StrictInt | None = None
    priority: TaskPriority = TaskPriority.MEDIUM


# ============================================================================
# AI SCHEMAS
# ============================================================================


class TaskDraft(TaskInsert):
    """
    Черновик задачи от AI.

    Та же форма, что и TaskInsert; лишние ключи от модели игнорируются.
    """

    model_config = ConfigDict(extra="ignore")


class AIProcessRequest(CamelModel):
    """Тело POST /api/ai/process."""

    prompt: str = Field(..., description="Свободный текст с задачами")


class AIProcessResponse(CamelModel):
    """Результат извлечения задач (ничего не сохраняется)."""

    tasks: list[TaskDraft]
    suggested_project: str | None = None


class AIBreakdownRequest(CamelModel):
    """Тело POST /api/ai/breakdown."""

    task_id: StrictInt = Field(..., description="ID задачи для разбиения")


class AIBreakdownResponse(CamelModel):
    """Подзадачи (информативно, не сохраняются)."""

    subtasks: list[str]


# ============================================================================
# COMMON SCHEMAS
# ============================================================================


class ErrorResponse(BaseModel):
    """
    Единый формат ошибки API.

    Пример (400):
    {
        "message": "Input should be 'low', 'medium' or 'high'",
        "field": "priority"
    }

    Пример (404):
    {
        "message": "Task not found"
    }
    """

    message: str
    field: str | None = None

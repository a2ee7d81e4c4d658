"""
Валидация входных данных.

Два режима для мутаций:
- validate_insert: все обязательные поля на месте, id/createdAt запрещены
- validate_update: любое поле может отсутствовать, присланные проверяются

Ошибка всегда одна - первая найденная (fail-fast), с путём к полю через
точку в camelCase: "title", "tagIds.1". Тот же формат использует
обработчик RequestValidationError в taskboard.api.errors.
"""

import enum
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import ErrorDetails

from .core.exceptions import ValidationError
from .schemas import (
    ProjectInsert,
    ProjectUpdate,
    TagInsert,
    TagUpdate,
    TaskCreateRequest,
    TaskUpdateRequest,
)

# Префиксы loc, которые FastAPI добавляет к ошибкам запроса
REQUEST_LOC_PREFIXES = ("body", "query", "path", "header", "cookie")

VALUE_ERROR_PREFIX = "Value error, "


class EntityKind(str, enum.Enum):
    """Тип сущности для валидации."""

    TASK = "task"
    PROJECT = "project"
    TAG = "tag"


INSERT_SCHEMAS: dict[EntityKind, type[BaseModel]] = {
    EntityKind.TASK: TaskCreateRequest,
    EntityKind.PROJECT: ProjectInsert,
    EntityKind.TAG: TagInsert,
}

UPDATE_SCHEMAS: dict[EntityKind, type[BaseModel]] = {
    EntityKind.TASK: TaskUpdateRequest,
    EntityKind.PROJECT: ProjectUpdate,
    EntityKind.TAG: TagUpdate,
}


def error_field(loc: Sequence[int | str]) -> str | None:
    """
    Путь к полю из pydantic loc.

    ("body", "tagIds", 1) -> "tagIds.1"
    """
    parts = list(loc)
    if parts and parts[0] in REQUEST_LOC_PREFIXES:
        parts = parts[1:]
    if not parts:
        return None
    return ".".join(str(p) for p in parts)


def error_message(error: Mapping[str, Any]) -> str:
    """Сообщение pydantic без служебного префикса 'Value error, '."""
    message = str(error.get("msg", "Invalid value"))
    if message.startswith(VALUE_ERROR_PREFIX):
        message = message[len(VALUE_ERROR_PREFIX) :]
    return message


def first_error(errors: Sequence[ErrorDetails]) -> ValidationError:
    """Преобразовать список ошибок pydantic в одну ValidationError (первую)."""
    if not errors:
        return ValidationError("Invalid input")
    error = errors[0]
    return ValidationError(error_message(error), error_field(error.get("loc", ())))


def _validate(schema: type[BaseModel], payload: Any) -> BaseModel:
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        raise first_error(exc.errors()) from exc


def validate_insert(kind: EntityKind, payload: Any) -> BaseModel:
    """
    Проверить данные для создания сущности.

    Args:
        kind: Тип сущности (TASK, PROJECT, TAG)
        payload: Сырые данные (dict из JSON)

    Returns:
        Валидированная схема (TaskCreateRequest / ProjectInsert / TagInsert)

    Raises:
        ValidationError: Первое нарушение с путём к полю

    Пример:
        data = validate_insert(EntityKind.TASK, {"title": "Buy milk", "priority": "low"})
    """
    return _validate(INSERT_SCHEMAS[kind], payload)


def validate_update(kind: EntityKind, payload: Any) -> BaseModel:
    """
    Проверить данные для частичного обновления.

    Отсутствующие поля допустимы; model_fields_set результата содержит
    только присланные поля.

    Raises:
        ValidationError: Первое нарушение с путём к полю
    """
    return _validate(UPDATE_SCHEMAS[kind], payload)

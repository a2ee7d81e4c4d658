"""Domain exceptions.

Все исключения наследуются от :class:`TaskboardError`, поэтому их можно
перехватить одним ``except TaskboardError``. HTTP-статусы назначаются в
``taskboard.api.errors``, сами исключения про HTTP ничего не знают.

Иерархия::

    TaskboardError
    ├── ValidationError   (400)
    ├── NotFoundError     (404)
    ├── ConflictError     (409)
    └── UpstreamError     (500)
"""

from __future__ import annotations


class TaskboardError(Exception):
    """Base exception for all taskboard errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r})"


class ValidationError(TaskboardError):
    """
    Входные данные не прошли проверку.

    Хранит только первое нарушение (fail-fast) и путь к полю через точку,
    например ``"tagIds.1"``.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message


class NotFoundError(TaskboardError):
    """Запрошенная запись не существует."""

    def __init__(self, resource: str, resource_id: int | str) -> None:
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(TaskboardError):
    """Операция противоречит текущему состоянию данных."""


class UpstreamError(TaskboardError):
    """
    Ошибка внешнего сервиса (AI).

    ``message`` безопасно показывать клиенту, ``detail`` только для логов.
    """

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.detail = detail

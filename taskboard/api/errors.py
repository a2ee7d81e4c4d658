"""
Обработчики ошибок (Exception Handlers) для API.

Единый формат ошибки для всего API:
    {"message": "...", "field": "..."}   # field только для ошибок валидации

Соответствие исключений и статусов:
    ValidationError, RequestValidationError -> 400
    NotFoundError                           -> 404
    ConflictError                           -> 409
    UpstreamError                           -> 500 (детали только в логах)
    прочие исключения                       -> 500 без деталей
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.exceptions import (
    ConflictError,
    NotFoundError,
    TaskboardError,
    UpstreamError,
    ValidationError,
)
from ..core.logging import get_logger
from ..validation import first_error

logger = get_logger(__name__)

STATUS_BY_ERROR: list[tuple[type[TaskboardError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (UpstreamError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]

INTERNAL_ERROR_MESSAGE = "Internal server error"


def error_body(message: str, field: str | None = None) -> dict[str, str]:
    """Тело ошибки; field добавляется только если известен."""
    body = {"message": message}
    if field:
        body["field"] = field
    return body


def status_for(exc: TaskboardError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def taskboard_error_handler(request: Request, exc: TaskboardError) -> JSONResponse:
    """
    Обработчик доменных ошибок (TaskboardError и наследники).

    4xx логируются как WARNING, 5xx как ERROR.
    """
    status_code = status_for(exc)
    field = exc.field if isinstance(exc, ValidationError) else None

    if status_code >= 500:
        logger.error(
            "Upstream failure",
            extra={
                "error": type(exc).__name__,
                "error_message": exc.message,
                "detail": getattr(exc, "detail", None),
                "path": request.url.path,
            },
        )
    else:
        logger.warning(
            "API error",
            extra={
                "error": type(exc).__name__,
                "error_message": exc.message,
                "field": field,
                "path": request.url.path,
            },
        )

    return JSONResponse(status_code=status_code, content=error_body(exc.message, field))


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Обработчик ошибок валидации запроса (body/query/path).

    Pydantic возвращает все ошибки списком:
        [{"type": "missing", "loc": ["body", "title"], "msg": "Field required"}, ...]

    Отдаём только первую, в нашем формате, со статусом 400:
        {"message": "Field required", "field": "title"}
    """
    error = first_error(exc.errors())
    logger.warning(
        "Validation error",
        extra={"field": error.field, "error_message": error.message, "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content=error_body(error.message, error.field)
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """HTTPException (401, 404 неизвестного пути, 405...) в едином формате."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Обработчик для всех остальных ошибок (500).

    Детали внутренних ошибок клиенту не показываем, только в лог.
    """
    logger.error(f"Internal Error: {type(exc).__name__}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(INTERNAL_ERROR_MESSAGE),
    )


def register_error_handlers(app: FastAPI) -> None:
    """
    Регистрирует все error handlers в приложении FastAPI.

    Вызывается из main.py:
        register_error_handlers(app)
    """
    app.add_exception_handler(TaskboardError, taskboard_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

"""API endpoints для работы с проектами."""

from fastapi import APIRouter, Depends, status

from ..schemas import ErrorResponse, ProjectInsert, ProjectResponse
from ..services import ProjectService
from .dependencies import get_project_service

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=list[ProjectResponse], summary="Список проектов")
async def list_projects(
    service: ProjectService = Depends(get_project_service),
) -> list[ProjectResponse]:
    projects = await service.get_projects()
    return [ProjectResponse.model_validate(p) for p in projects]


@router.get(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Получить проект по ID",
    responses={404: {"model": ErrorResponse, "description": "Проект не найден"}},
)
async def get_project(
    project_id: int, service: ProjectService = Depends(get_project_service)
) -> ProjectResponse:
    project = await service.require_project(project_id)
    return ProjectResponse.model_validate(project)


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Создать проект",
    responses={400: {"model": ErrorResponse, "description": "Ошибка валидации или slug занят"}},
)
async def create_project(
    data: ProjectInsert, service: ProjectService = Depends(get_project_service)
) -> ProjectResponse:
    """
    Пример запроса:
    ```json
    {"name": "Work", "slug": "work", "color": "#3b82f6"}
    ```
    """
    project = await service.create_project(data)
    return ProjectResponse.model_validate(project)


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удалить проект",
    description="""
    Удаляет проект. Судьба задач проекта зависит от PROJECT_DELETE_POLICY:
    keep (по умолчанию) / nullify / cascade / restrict (409, если есть задачи).
    """,
    responses={409: {"model": ErrorResponse, "description": "У проекта есть задачи"}},
)
async def delete_project(
    project_id: int, service: ProjectService = Depends(get_project_service)
) -> None:
    await service.delete_project(project_id)

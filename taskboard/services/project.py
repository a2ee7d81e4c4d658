"""Project service with business logic."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import ProjectDeletePolicy, settings
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..core.logging import get_logger
from ..models import Project
from ..repositories import ProjectRepository, TaskRepository
from ..schemas import ProjectInsert

logger = get_logger(__name__)


class ProjectService:
    """
    Сервис для работы с проектами.

    Задачи ссылаются на проект без внешнего ключа, поэтому судьбу задач
    при удалении проекта определяет ProjectDeletePolicy.
    """

    def __init__(self, db: AsyncSession, delete_policy: ProjectDeletePolicy | None = None):
        self.db = db
        self.project_repo = ProjectRepository(db)
        self.task_repo = TaskRepository(db)
        self.delete_policy = delete_policy or settings.PROJECT_DELETE_POLICY

    async def get_projects(self) -> list[Project]:
        """Получить все проекты (в порядке создания)."""
        return await self.project_repo.get_all()

    async def get_project(self, project_id: int) -> Project | None:
        """Получить проект по ID или None."""
        return await self.project_repo.get_by_id(project_id)

    async def require_project(self, project_id: int) -> Project:
        """
        Получить проект или выбросить NotFoundError.

        Raises:
            NotFoundError: Если проекта нет
        """
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return project

    async def create_project(self, data: ProjectInsert) -> Project:
        """
        Создать проект.

        Raises:
            ValidationError: Если slug уже занят

        Бизнес-правила:
        1. slug уникален
        2. color по умолчанию "#000000", формат не проверяется
        """
        if await self.project_repo.get_by_slug(data.slug):
            raise self._duplicate_slug(data.slug)

        # Параллельный запрос мог занять slug между проверкой и INSERT
        try:
            project = await self.project_repo.create(Project(**data.model_dump()))
        except IntegrityError as exc:
            raise self._duplicate_slug(data.slug) from exc

        logger.info("Project created", extra={"project_id": project.id, "slug": project.slug})
        return project

    @staticmethod
    def _duplicate_slug(slug: str) -> ValidationError:
        return ValidationError(f"Project with slug '{slug}' already exists", field="slug")

    async def delete_project(self, project_id: int) -> None:
        """
        Удалить проект согласно политике.

        - KEEP: задачи сохраняют "висячий" project_id
        - NULLIFY: project_id задач обнуляется
        - CASCADE: задачи проекта удаляются (вместе с их тегами)
        - RESTRICT: ConflictError, если у проекта есть задачи

        Удаление несуществующего проекта - no-op при любой политике.

        Raises:
            ConflictError: Политика RESTRICT и у проекта есть задачи
        """
        if not await self.project_repo.exists(project_id):
            return

        affected = 0
        if self.delete_policy == ProjectDeletePolicy.RESTRICT:
            tasks = await self.task_repo.get_by_project(project_id)
            if tasks:
                raise ConflictError(f"Cannot delete project with {len(tasks)} tasks")
        elif self.delete_policy == ProjectDeletePolicy.NULLIFY:
            affected = await self.task_repo.detach_project(project_id)
        elif self.delete_policy == ProjectDeletePolicy.CASCADE:
            affected = await self.task_repo.delete_by_project(project_id)

        await self.project_repo.delete(project_id)
        logger.info(
            "Project deleted",
            extra={
                "project_id": project_id,
                "policy": self.delete_policy.value,
                "tasks_affected": affected,
            },
        )

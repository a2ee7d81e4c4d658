"""Project repository with specific queries."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Project
from .base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """Репозиторий для работы с проектами."""

    def __init__(self, db: AsyncSession):
        super().__init__(Project, db)

    async def get_by_slug(self, slug: str) -> Project | None:
        """
        Найти проект по slug (уникальный).

        SQL эквивалент:
            SELECT * FROM projects WHERE slug = {slug};
        """
        result = await self.db.execute(select(Project).where(Project.slug == slug))
        return result.scalar_one_or_none()

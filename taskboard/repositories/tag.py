"""Tag repository with specific queries."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Tag, TaskTag
from .base import BaseRepository


class TagRepository(BaseRepository[Tag]):
    """Репозиторий для работы с тегами."""

    def __init__(self, db: AsyncSession):
        super().__init__(Tag, db)

    async def get_by_name(self, name: str) -> Tag | None:
        """
        Найти тег по точному названию.

        SQL эквивалент:
            SELECT * FROM tags WHERE name = {name};
        """
        result = await self.db.execute(select(Tag).where(Tag.name == name))
        return result.scalar_one_or_none()

    async def get_for_task(self, task_id: int) -> list[Tag]:
        """
        Получить теги задачи через таблицу связей.

        SQL эквивалент:
            SELECT tags.*
            FROM task_tags
            JOIN tags ON task_tags.tag_id = tags.id
            WHERE task_tags.task_id = {task_id};
        """
        result = await self.db.execute(
            select(Tag)
            .join(TaskTag, TaskTag.tag_id == Tag.id)
            .where(TaskTag.task_id == task_id)
            .order_by(TaskTag.id)
        )
        return list(result.scalars().all())

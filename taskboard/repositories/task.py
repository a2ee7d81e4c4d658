"""Task repository with specific queries."""

from collections.abc import Iterable

from sqlalchemy import and_, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Task, TaskStatus, TaskTag
from .base import BaseRepository


def escape_like(term: str) -> str:
    """Экранировать спецсимволы LIKE, чтобы поиск был буквальной подстрокой."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class TaskRepository(BaseRepository[Task]):
    """
    Репозиторий для работы с задачами.

    Включает методы для:
    - Фильтрации и поиска
    - Работы со связями task_tags
    - Обхода дерева подзадач (parent_id)
    - Массовых операций при удалении проекта
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Task, db)

    async def get_filtered(
        self,
        project_id: int | None = None,
        status: TaskStatus | None = None,
        search: str | None = None,
    ) -> list[Task]:
        """
        Получить задачи с фильтрами, новые сверху.

        Все фильтры комбинируются через AND, None = фильтр не задан.

        SQL эквивалент:
            SELECT * FROM tasks
            WHERE project_id = {project_id}              -- если указан
              AND status = {status}                      -- если указан
              AND title ILIKE '%{search}%' ESCAPE '\\'   -- если указан
            ORDER BY created_at DESC, id DESC;
        """
        query = select(Task)

        conditions = []
        if project_id is not None:
            conditions.append(Task.project_id == project_id)
        if status is not None:
            conditions.append(Task.status == status)
        if search:
            conditions.append(Task.title.ilike(f"%{escape_like(search)}%", escape="\\"))

        if conditions:
            query = query.where(and_(*conditions))

        query = query.order_by(Task.created_at.desc(), Task.id.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_project(self, project_id: int) -> list[Task]:
        """Получить все задачи проекта."""
        result = await self.db.execute(select(Task).where(Task.project_id == project_id))
        return list(result.scalars().all())

    async def get_parent_id(self, task_id: int) -> int | None:
        """Получить parent_id задачи (None если корневая или не существует)."""
        result = await self.db.execute(select(Task.parent_id).where(Task.id == task_id))
        return result.scalar_one_or_none()

    async def add_tags(self, task_id: int, tag_ids: Iterable[int]) -> None:
        """
        Привязать теги к задаче.

        Существование тегов не проверяется - это ответственность вызывающего.

        SQL эквивалент:
            INSERT INTO task_tags (task_id, tag_id) VALUES ({task_id}, {tag_id}), ...;
        """
        links = [TaskTag(task_id=task_id, tag_id=tag_id) for tag_id in tag_ids]
        if not links:
            return
        self.db.add_all(links)
        await self.db.flush()

    async def clear_tags(self, task_id: int) -> int:
        """
        Отвязать все теги задачи.

        Returns:
            Количество удалённых связей
        """
        result = await self.db.execute(delete(TaskTag).where(TaskTag.task_id == task_id))
        return result.rowcount

    async def delete_with_tags(self, task_id: int) -> bool:
        """
        Удалить задачу вместе со связями task_tags.

        Связи удаляются явно: SQLite не применяет ON DELETE CASCADE
        без PRAGMA foreign_keys.
        """
        await self.clear_tags(task_id)
        return await self.delete(task_id)

    async def detach_project(self, project_id: int) -> int:
        """
        Обнулить project_id у всех задач проекта.

        SQL эквивалент:
            UPDATE tasks SET project_id = NULL WHERE project_id = {project_id};
        """
        result = await self.db.execute(
            update(Task)
            .where(Task.project_id == project_id)
            .values(project_id=None)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def delete_by_project(self, project_id: int) -> int:
        """
        Удалить все задачи проекта вместе с их связями task_tags.

        Returns:
            Количество удалённых задач
        """
        task_ids = select(Task.id).where(Task.project_id == project_id)
        await self.db.execute(delete(TaskTag).where(TaskTag.task_id.in_(task_ids)))
        result = await self.db.execute(
            delete(Task)
            .where(Task.project_id == project_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

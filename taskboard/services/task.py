"""Task service: the query/mutation contract for tasks."""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError, ValidationError
from ..core.logging import get_logger
from ..integrations.quick_add import parse_quick_add
from ..models import Tag, Task, TaskPriority, TaskStatus
from ..repositories import TagRepository, TaskRepository
from ..schemas import TaskInsert, TaskUpdate

logger = get_logger(__name__)


def unique_ids(ids: list[int]) -> list[int]:
    """Убрать повторы, сохранив порядок первого появления."""
    return list(dict.fromkeys(ids))


class TaskService:
    """
    Сервис для работы с задачами.

    Единственная доверенная граница между валидированными данными и БД:
    - Фильтрация и поиск
    - PATCH-семантика обновления
    - Замена набора тегов (task_tags)
    - Проверка дерева подзадач на циклы

    Все изменения делаются через flush(); commit выполняет get_db в конце
    запроса, поэтому вставка задачи и её тегов атомарны.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.task_repo = TaskRepository(db)
        self.tag_repo = TagRepository(db)

    async def list_tasks(
        self,
        project_id: int | None = None,
        status: TaskStatus | None = None,
        search: str | None = None,
    ) -> list[Task]:
        """
        Получить задачи с фильтрами (новые сверху).

        Args:
            project_id: Только задачи проекта
            status: Только задачи с этим статусом
            search: Подстрока в названии (без учёта регистра)

        Returns:
            Список задач; пустой список, если ничего не найдено
        """
        return await self.task_repo.get_filtered(
            project_id=project_id, status=status, search=search
        )

    async def get_task(self, task_id: int) -> Task | None:
        """
        Получить задачу по ID.

        Returns:
            Задача или None (отсутствие - не ошибка на этом уровне)
        """
        return await self.task_repo.get_by_id(task_id)

    async def require_task(self, task_id: int) -> Task:
        """
        Получить задачу или выбросить NotFoundError.

        Raises:
            NotFoundError: Если задачи нет
        """
        task = await self.task_repo.get_by_id(task_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        return task

    async def create_task(self, data: TaskInsert, tag_ids: list[int] | None = None) -> Task:
        """
        Создать задачу и (опционально) привязать теги.

        Args:
            data: Валидированные поля задачи
            tag_ids: ID тегов; существование тегов не проверяется

        Returns:
            Созданная задача (только строка задачи, теги - через get_task_tags)

        Бизнес-правила:
        1. id и created_at генерируются
        2. Одна строка task_tags на каждый уникальный tag_id
        """
        task = await self.task_repo.create(Task(**data.model_dump()))

        if tag_ids:
            await self.task_repo.add_tags(task.id, unique_ids(tag_ids))

        logger.info("Task created", extra={"task_id": task.id, "tag_count": len(tag_ids or [])})
        return task

    async def update_task(
        self, task_id: int, data: TaskUpdate, tag_ids: list[int] | None = None
    ) -> Task:
        """
        Частично обновить задачу (PATCH).

        Args:
            task_id: ID задачи
            data: Изменения; меняются только явно переданные поля
            tag_ids: None - теги не трогаем; список (даже пустой) - заменяет набор

        Returns:
            Обновлённая задача

        Raises:
            NotFoundError: Если задачи нет
            ValidationError: Если parentId создаёт цикл

        Бизнес-правила:
        1. Отсутствующие поля сохраняют прежние значения
        2. tag_ids=[] снимает все теги, tag_ids=None оставляет как есть
        3. Замена тегов = delete + insert в одной транзакции
        """
        # 1. ПРОВЕРКА: Задача существует
        task = await self.require_task(task_id)

        changes = data.changes()

        # 2. ВАЛИДАЦИЯ: Дерево подзадач без циклов
        if changes.get("parent_id") is not None:
            await self._check_no_cycle(task_id, changes["parent_id"])

        # 3. ОБНОВЛЕНИЕ: Только переданные поля
        if changes:
            task = await self.task_repo.update(task_id, **changes)

        # 4. ТЕГИ: Замена набора целиком
        if tag_ids is not None:
            await self.task_repo.clear_tags(task_id)
            await self.task_repo.add_tags(task_id, unique_ids(tag_ids))

        logger.info(
            "Task updated",
            extra={
                "task_id": task_id,
                "fields": sorted(changes),
                "tags_replaced": tag_ids is not None,
            },
        )
        return task

    async def delete_task(self, task_id: int) -> None:
        """
        Удалить задачу вместе со связями task_tags.

        Удаление несуществующей задачи - не ошибка (no-op).
        """
        deleted = await self.task_repo.delete_with_tags(task_id)
        if deleted:
            logger.info("Task deleted", extra={"task_id": task_id})

    async def get_task_tags(self, task_id: int) -> list[Tag]:
        """
        Получить теги, привязанные к задаче.

        Returns:
            Список тегов (пустой для задачи без тегов или несуществующей)
        """
        return await self.tag_repo.get_for_task(task_id)

    async def quick_add(
        self,
        text: str,
        project_id: int | None = None,
        priority: TaskPriority = TaskPriority.MEDIUM,
        now: datetime | None = None,
    ) -> Task:
        """
        Создать задачу из короткой фразы ("Finish report tomorrow").

        Raises:
            ValidationError: Если после разбора не осталось названия
        """
        parsed = parse_quick_add(text, now=now)
        if not parsed.title:
            raise ValidationError("Task title cannot be empty", field="text")

        data = TaskInsert(
            title=parsed.title,
            due_date=parsed.due_date,
            project_id=project_id,
            priority=priority,
        )
        return await self.create_task(data)

    async def _check_no_cycle(self, task_id: int, parent_id: int) -> None:
        """
        Проверить, что parent_id не делает задачу своим же предком.

        Поднимаемся по цепочке родителей от parent_id; если встретили
        task_id - это цикл. Несуществующий родитель цепочку обрывает.
        """
        if parent_id == task_id:
            raise ValidationError("Task cannot be its own parent", field="parentId")

        visited: set[int] = set()
        current: int | None = parent_id
        while current is not None and current not in visited:
            if current == task_id:
                raise ValidationError("Parent assignment would create a cycle", field="parentId")
            visited.add(current)
            current = await self.task_repo.get_parent_id(current)

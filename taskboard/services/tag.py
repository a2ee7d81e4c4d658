"""Tag service with business logic."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ValidationError
from ..core.logging import get_logger
from ..models import Tag
from ..repositories import TagRepository
from ..schemas import TagInsert

logger = get_logger(__name__)


class TagService:
    """Сервис для работы с тегами."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.tag_repo = TagRepository(db)

    async def get_tags(self) -> list[Tag]:
        """Получить все теги."""
        return await self.tag_repo.get_all()

    async def create_tag(self, data: TagInsert) -> Tag:
        """
        Создать тег.

        Raises:
            ValidationError: Если тег с таким названием уже есть
                (в том числе при параллельной вставке: IntegrityError от БД)
        """
        if await self.tag_repo.get_by_name(data.name):
            raise self._duplicate_name(data.name)

        try:
            tag = await self.tag_repo.create(Tag(**data.model_dump()))
        except IntegrityError as exc:
            raise self._duplicate_name(data.name) from exc

        logger.info("Tag created", extra={"tag_id": tag.id, "tag_name": tag.name})
        return tag

    @staticmethod
    def _duplicate_name(name: str) -> ValidationError:
        return ValidationError(f"Tag '{name}' already exists", field="name")

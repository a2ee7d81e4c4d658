"""Project model."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

DEFAULT_COLOR = "#000000"


class Project(Base):
    """
    Проект - именованная группа задач.

    Задачи ссылаются на проект через Task.project_id без внешнего ключа:
    что происходит с задачами при удалении проекта, решает
    ProjectDeletePolicy в настройках.
    """

    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    color: Mapped[str] = mapped_column(Text, default=DEFAULT_COLOR, nullable=False)

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, slug='{self.slug}')>"

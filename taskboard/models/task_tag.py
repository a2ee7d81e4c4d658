"""Task-Tag association model."""

from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class TaskTag(Base):
    """
    Связь задачи и тега.

    Пара (task_id, tag_id) уникальна; строки удаляются каскадом
    вместе с задачей или тегом.
    """

    __tablename__ = "task_tags"
    __table_args__ = (UniqueConstraint("task_id", "tag_id", name="uq_task_tags_task_tag"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    task_id: Mapped[int] = mapped_column(
        ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tag_id: Mapped[int] = mapped_column(
        ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    task: Mapped["Task"] = relationship("Task", back_populates="tag_links")
    tag: Mapped["Tag"] = relationship("Tag", back_populates="task_links")

    def __repr__(self) -> str:
        return f"<TaskTag(task_id={self.task_id}, tag_id={self.tag_id})>"

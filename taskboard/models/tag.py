"""Tag model."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base
from .project import DEFAULT_COLOR


class Tag(Base):
    """Tag model (many-to-many with tasks through task_tags)."""

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    color: Mapped[str] = mapped_column(Text, default=DEFAULT_COLOR, nullable=False)

    # Relationships
    task_links: Mapped[list["TaskTag"]] = relationship(
        "TaskTag", back_populates="tag", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name='{self.name}')>"

"""Task row model."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, OwnedMixin, utc_now


class TaskRow(Base, OwnedMixin):
    """
    Строка таблицы tasks.

    tags и comments хранятся как JSON - комментарии не являются
    отдельной сущностью, только полем задачи.
    """

    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime | None] = mapped_column(DateTime, default=utc_now, nullable=True)
    points: Mapped[int | None] = mapped_column(Integer, nullable=True)
    tags: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    column_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    priority: Mapped[str | None] = mapped_column(String(16), nullable=True)
    comments: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)
    order: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<TaskRow(id={self.id!r}, column_id={self.column_id!r}, order={self.order})>"

"""
Board entities shared by the sync context and every storage provider.

Поля в Python - snake_case, в JSON (embedded store, экспорт, API) - camelCase:
    task.column_id  <->  {"columnId": ...}
    task.created_at <->  {"createdAt": 1760000000000}   # epoch millis
"""

import enum
import time

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def now_millis() -> int:
    """Current time as integer epoch milliseconds."""
    return int(time.time() * 1000)


class Priority(str, enum.Enum):
    """Task priority."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Theme(str, enum.Enum):
    """Presentation theme persisted by the settings repository."""

    LIGHT = "light"
    DARK = "dark"


class BoardEntity(BaseModel):
    """Base model: camelCase aliases, construction by field name allowed."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        """Serialize to the camelCase JSON shape."""
        return self.model_dump(mode="json", by_alias=True)


class Comment(BoardEntity):
    """Комментарий - существует только внутри Task.comments."""

    id: str
    text: str
    created_at: int = Field(default_factory=now_millis)
    author: str
    author_avatar: str | None = None


class Task(BoardEntity):
    """
    Карточка задачи.

    order - позиция внутри колонки. Инвариант после refresh:
    у задач одной колонки order образуют 0..n-1 без пропусков и повторов.
    None означает, что позиция ещё не назначена (например, старые данные).
    """

    id: str
    title: str
    description: str = ""
    created_at: int = Field(default_factory=now_millis)
    points: int = Field(default=0, ge=0)
    tags: list[str] = Field(default_factory=list)
    column_id: str
    priority: Priority = Priority.MEDIUM
    comments: list[Comment] = Field(default_factory=list)
    order: int | None = None


class Column(BoardEntity):
    """Колонка доски. order - позиция в общей последовательности колонок."""

    id: str
    name: str
    color: str
    order: int = 0


class Board(BoardEntity):
    """Transient aggregate used as the unit of export/import."""

    columns: list[Column] = Field(default_factory=list)
    tasks: list[Task] = Field(default_factory=list)

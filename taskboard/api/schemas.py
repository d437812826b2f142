"""
Pydantic схемы для API.

Ответы используют сущности из taskboard.schemas напрямую (Task, Column) -
они уже сериализуются в camelCase. Здесь только тела запросов и обёртки.
"""

from typing import Any

from pydantic import BaseModel, Field

from ..core.result import BatchResult, ErrorInfo
from ..schemas import BoardEntity, Column, Comment, Priority, Task, Theme
from ..services import ImportPreview

# ============================================================================
# TASK SCHEMAS
# ============================================================================


class TaskCreate(BoardEntity):
    """
    Схема для создания задачи (POST /tasks).

    Пример запроса:
    {
        "columnId": "col-1",
        "title": "Player jump animation",
        "points": 3,
        "tags": ["Art", "Programming"],
        "priority": "high"
    }
    """

    column_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=300)
    description: str = ""
    points: int = Field(default=0, ge=0)
    tags: list[str] = Field(default_factory=list)
    priority: Priority = Priority.MEDIUM


class TaskUpdate(BoardEntity):
    """
    Схема для обновления задачи (PUT /tasks/{id}).

    Все поля опциональные: непереданные берутся из текущей задачи,
    в provider уходит полная замена. Перенос между колонками - через /move.
    """

    title: str | None = Field(None, min_length=1, max_length=300)
    description: str | None = None
    points: int | None = Field(None, ge=0)
    tags: list[str] | None = None
    priority: Priority | None = None
    comments: list[Comment] | None = None


class TaskMove(BoardEntity):
    """
    Drop задачи (POST /tasks/{id}/move).

    columnId отличается от текущей колонки -> задача уходит в конец columnId.
    Та же колонка + targetTaskId -> задача встаёт на место targetTaskId.
    """

    column_id: str
    target_task_id: str | None = None


# ============================================================================
# COLUMN SCHEMAS
# ============================================================================


class ColumnCreate(BoardEntity):
    """Схема для создания колонки (POST /columns). Колонка добавляется в конец."""

    name: str = Field(..., min_length=1, max_length=200)
    color: str = Field(..., min_length=1, max_length=64)


class ColumnUpdate(BoardEntity):
    """Переименование / смена цвета (PUT /columns/{id})."""

    name: str | None = Field(None, min_length=1, max_length=200)
    color: str | None = Field(None, min_length=1, max_length=64)


class ColumnMove(BoardEntity):
    """Drop колонки на место другой колонки (POST /columns/{id}/move)."""

    target_column_id: str


# ============================================================================
# BOARD SCHEMAS
# ============================================================================


class ThemeUpdate(BaseModel):
    theme: Theme


class ErrorDetail(BaseModel):
    """Детали ошибки для конкретного поля."""

    field: str = Field(..., description="Название поля с ошибкой")
    message: str = Field(..., description="Описание ошибки")


class ErrorBody(BaseModel):
    """Тело ошибки."""

    code: str = Field(..., description="Код ошибки (NOT_FOUND, VALIDATION_ERROR, ...)")
    message: str = Field(..., description="Человекочитаемое сообщение")
    details: list[ErrorDetail] | None = Field(None, description="Детали ошибки")


class ErrorResponse(BaseModel):
    """
    Единый формат ошибки API.

    Пример:
    {
        "error": {
            "code": "BACKEND_ERROR",
            "message": "connection refused",
            "details": null
        }
    }
    """

    error: ErrorBody


class ErrorInfoResponse(BoardEntity):
    kind: str
    message: str
    details: list[str] = Field(default_factory=list)

    @classmethod
    def from_error(cls, error: ErrorInfo | None) -> "ErrorInfoResponse | None":
        if error is None:
            return None
        return cls(kind=error.kind.value, message=error.message, details=list(error.details))


class BoardState(BoardEntity):
    """Текущее содержимое кэша BoardSyncContext."""

    provider: str
    is_loading: bool
    theme: Theme
    error: ErrorInfoResponse | None = None
    columns: list[Column]
    tasks: list[Task]


class BatchResponse(BoardEntity):
    """
    Результат последовательной пачки записей (reorder, каскадное удаление, импорт).

    applied - уже записано, pending - не записано (первым - упавший элемент).
    """

    ok: bool
    applied: list[Any] = Field(default_factory=list)
    pending: list[Any] = Field(default_factory=list)
    error: ErrorInfoResponse | None = None

    @classmethod
    def from_batch(cls, batch: BatchResult) -> "BatchResponse":
        return cls(
            ok=batch.ok,
            applied=[_batch_item(item) for item in batch.applied],
            pending=[_batch_item(item) for item in batch.pending],
            error=ErrorInfoResponse.from_error(batch.error),
        )


def _batch_item(item: Any) -> Any:
    return item.to_document() if isinstance(item, BoardEntity) else item


class MoveResponse(BoardEntity):
    """moved=false - drop проигнорирован (та же позиция, неизвестный id)."""

    moved: bool
    task: Task | None = None
    batch: BatchResponse | None = None


class ImportPreviewResponse(BoardEntity):
    valid: bool
    board_name: str | None = None
    exported_at: int | None = None
    version: str | None = None
    columns_count: int
    tasks_count: int
    errors: list[str]

    @classmethod
    def from_preview(cls, preview: ImportPreview) -> "ImportPreviewResponse":
        return cls(
            valid=preview.valid,
            board_name=preview.board_name,
            exported_at=preview.exported_at,
            version=preview.version,
            columns_count=preview.columns_count,
            tasks_count=preview.tasks_count,
            errors=preview.errors,
        )

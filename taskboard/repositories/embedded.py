"""
Embedded store: repositories over a locally persisted key-value document.

Вся работа идёт в памяти и синхронно; async-контракт нужен только чтобы
embedded и relational провайдеры были взаимозаменяемы.

Формат файла (camelCase, как в экспорте):
    {
        "kanban-tasks": [{"id": "task-1", "columnId": "col-1", "order": 0, ...}],
        "kanban-columns": [{"id": "col-1", "name": "To Do", "color": "...", "order": 0}],
        "app-theme": "light"
    }
"""

import copy
import functools
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any, Generic, TypeVar

from ..core.logging import get_logger
from ..core.result import ErrorInfo, Result
from ..schemas import BoardEntity, Column, Task, Theme

logger = get_logger(__name__)

EntityT = TypeVar("EntityT", bound=BoardEntity)

TASKS_KEY = "kanban-tasks"
COLUMNS_KEY = "kanban-columns"
THEME_KEY = "app-theme"


class KeyValueStore:
    """
    JSON document with one value per key.

    path=None - хранилище живёт только в памяти (memory провайдер, тесты).
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path else None
        self._data: dict[str, Any] | None = None

    def _load(self) -> dict[str, Any]:
        if self._data is None:
            if self.path is not None and self.path.exists():
                with open(self.path, encoding="utf-8") as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError(f"Store file {self.path} does not contain a JSON object")
                self._data = data
            else:
                self._data = {}
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        # Копия - чтобы вызывающий код не мутировал состояние хранилища
        return copy.deepcopy(self._load().get(key, default))

    def set(self, key: str, value: Any) -> None:
        # Кэш меняется только после успешной записи файла
        data = {**self._load(), key: copy.deepcopy(value)}
        self._save(data)
        self._data = data

    def _save(self, data: dict[str, Any]) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        tmp_path.replace(self.path)


def store_operation(func: Callable) -> Callable:
    """Convert IO and decoding errors of a store call into a backend failure Result."""

    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await func(self, *args, **kwargs)
        except (OSError, ValueError) as e:
            # ValueError покрывает json.JSONDecodeError и pydantic.ValidationError
            logger.warning(
                "Embedded store operation failed",
                extra={"operation": func.__name__, "error": str(e)},
            )
            return Result.failure(ErrorInfo.from_exception(e))

    return wrapper


class EmbeddedCollection(Generic[EntityT]):
    """Typed list of entities stored under one key."""

    def __init__(self, store: KeyValueStore, key: str, entity: type[EntityT]):
        self.store = store
        self.key = key
        self.entity = entity

    def load(self) -> list[EntityT]:
        return [self.entity.model_validate(item) for item in self.store.get(self.key) or []]

    def save(self, items: list[EntityT]) -> None:
        self.store.set(self.key, [item.to_document() for item in items])

    def find(self, item_id: str) -> EntityT | None:
        return next((item for item in self.load() if item.id == item_id), None)

    def append(self, item: EntityT) -> None:
        self.save([*self.load(), item])

    def replace(self, item: EntityT) -> None:
        """Replace by id; silently does nothing if the id is absent."""
        self.save([item if existing.id == item.id else existing for existing in self.load()])

    def remove(self, item_id: str) -> None:
        self.save([item for item in self.load() if item.id != item_id])


class EmbeddedTaskRepository:
    """TaskRepository over the embedded store."""

    def __init__(self, store: KeyValueStore):
        self.collection = EmbeddedCollection(store, TASKS_KEY, Task)

    @store_operation
    async def get_tasks(self) -> Result[list[Task]]:
        return Result.success(self.collection.load())

    @store_operation
    async def get_task_by_id(self, task_id: str) -> Result[Task]:
        return Result.success(self.collection.find(task_id))

    @store_operation
    async def create_task(self, task: Task) -> Result[Task]:
        self.collection.append(task)
        return Result.success(task)

    @store_operation
    async def update_task(self, task: Task) -> Result[Task]:
        # Отсутствующий id - no-op без ошибки (так ведёт себя и исходный store)
        self.collection.replace(task)
        return Result.success(task)

    @store_operation
    async def delete_task(self, task_id: str) -> Result[None]:
        self.collection.remove(task_id)
        return Result.success()

    @store_operation
    async def get_tasks_by_column(self, column_id: str) -> Result[list[Task]]:
        return Result.success([task for task in self.collection.load() if task.column_id == column_id])


class EmbeddedColumnRepository:
    """ColumnRepository over the embedded store."""

    def __init__(self, store: KeyValueStore):
        self.collection = EmbeddedCollection(store, COLUMNS_KEY, Column)

    @store_operation
    async def get_columns(self) -> Result[list[Column]]:
        return Result.success(self.collection.load())

    @store_operation
    async def get_column_by_id(self, column_id: str) -> Result[Column]:
        return Result.success(self.collection.find(column_id))

    @store_operation
    async def create_column(self, column: Column) -> Result[Column]:
        self.collection.append(column)
        return Result.success(column)

    @store_operation
    async def update_column(self, column: Column) -> Result[Column]:
        self.collection.replace(column)
        return Result.success(column)

    @store_operation
    async def delete_column(self, column_id: str) -> Result[None]:
        self.collection.remove(column_id)
        return Result.success()

    @store_operation
    async def reorder_columns(self, columns: list[Column]) -> Result[list[Column]]:
        """Replace the whole collection verbatim: the caller has already densified order."""
        self.collection.save(list(columns))
        return Result.success(list(columns))


class EmbeddedSettingsRepository:
    """SettingsRepository over the embedded store."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    @store_operation
    async def get_theme(self) -> Result[Theme]:
        return Result.success(Theme(self.store.get(THEME_KEY) or Theme.LIGHT.value))

    @store_operation
    async def set_theme(self, theme: Theme) -> Result[Theme]:
        theme = Theme(theme)
        self.store.set(THEME_KEY, theme.value)
        return Result.success(theme)

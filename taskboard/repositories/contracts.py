"""
Repository contracts every storage backend implements.

Interface Segregation: у каждой сущности свой протокол, а DataProvider
собирает их вместе с жизненным циклом. BoardSyncContext зависит только
от этих протоколов, никогда от конкретного backend.

Все методы асинхронные и возвращают Result - ожидаемые ошибки
(not found, недоступная БД) не выбрасываются.
"""

from typing import Literal, Protocol

from ..core.result import Result
from ..schemas import Column, Task, Theme

ProviderType = Literal["embedded", "relational", "memory"]


class TaskRepository(Protocol):
    """Operations on tasks."""

    async def get_tasks(self) -> Result[list[Task]]:
        """Load all tasks."""
        ...

    async def get_task_by_id(self, task_id: str) -> Result[Task]:
        """
        Get a single task.

        Returns:
            Result(data=None, error=None) if the task does not exist.
        """
        ...

    async def create_task(self, task: Task) -> Result[Task]: ...

    async def update_task(self, task: Task) -> Result[Task]:
        """Full replace of the task with the same id."""
        ...

    async def delete_task(self, task_id: str) -> Result[None]: ...

    async def get_tasks_by_column(self, column_id: str) -> Result[list[Task]]: ...


class ColumnRepository(Protocol):
    """Operations on columns."""

    async def get_columns(self) -> Result[list[Column]]: ...

    async def get_column_by_id(self, column_id: str) -> Result[Column]:
        """Returns Result(None, None) if the column does not exist."""
        ...

    async def create_column(self, column: Column) -> Result[Column]: ...

    async def update_column(self, column: Column) -> Result[Column]: ...

    async def delete_column(self, column_id: str) -> Result[None]:
        """Delete the column only. Tasks referencing it are the caller's concern."""
        ...

    async def reorder_columns(self, columns: list[Column]) -> Result[list[Column]]:
        """
        Persist the full new column sequence.

        Returns:
            The sequence with each column's order equal to its position.
        """
        ...


class SettingsRepository(Protocol):
    """User preferences."""

    async def get_theme(self) -> Result[Theme]: ...

    async def set_theme(self, theme: Theme) -> Result[Theme]: ...


class DataProvider(Protocol):
    """
    Aggregate of the three repositories plus lifecycle hooks.

    initialize() - установить соединение / проверить доступность,
                   выбрасывает ConnectivityError если backend недоступен.
    disconnect() - освободить ресурсы; идемпотентен и никогда не падает.
    """

    name: str
    tasks: TaskRepository
    columns: ColumnRepository
    settings: SettingsRepository

    async def initialize(self) -> None: ...

    async def disconnect(self) -> None: ...

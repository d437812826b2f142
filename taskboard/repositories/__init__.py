"""Repository layer: contracts and the embedded/relational adapters."""

from .base import OwnedRepository
from .column import RelationalColumnRepository
from .contracts import (
    ColumnRepository,
    DataProvider,
    ProviderType,
    SettingsRepository,
    TaskRepository,
)
from .embedded import (
    COLUMNS_KEY,
    TASKS_KEY,
    THEME_KEY,
    EmbeddedColumnRepository,
    EmbeddedSettingsRepository,
    EmbeddedTaskRepository,
    KeyValueStore,
)
from .settings import RelationalSettingsRepository
from .task import RelationalTaskRepository

__all__ = [
    "TaskRepository",
    "ColumnRepository",
    "SettingsRepository",
    "DataProvider",
    "ProviderType",
    "OwnedRepository",
    "RelationalTaskRepository",
    "RelationalColumnRepository",
    "RelationalSettingsRepository",
    "KeyValueStore",
    "EmbeddedTaskRepository",
    "EmbeddedColumnRepository",
    "EmbeddedSettingsRepository",
    "TASKS_KEY",
    "COLUMNS_KEY",
    "THEME_KEY",
]

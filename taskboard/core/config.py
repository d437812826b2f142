"""Application configuration."""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

# config/.env лежит в корне проекта: taskboard/core/ -> taskboard/ -> project_root/
BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_FILE = BASE_DIR / "config" / ".env"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Все настройки можно переопределить через переменные окружения.
    Пример: BOARD_BACKEND=relational DATABASE_URL=... uvicorn taskboard.main:app
    """

    # =========================================================================
    # Application
    # =========================================================================
    APP_NAME: str = "Taskboard Sync"
    DEBUG: bool = False

    # =========================================================================
    # Storage backend
    # =========================================================================
    # BOARD_BACKEND - какой провайдер данных использовать:
    # "embedded"   - локальный JSON файл (key-value)
    # "memory"     - только в памяти (тесты, демо)
    # "relational" - удалённая реляционная БД через SQLAlchemy
    BOARD_BACKEND: Literal["embedded", "relational", "memory"] = "embedded"

    # EMBEDDED_STORE_PATH - файл для embedded провайдера
    EMBEDDED_STORE_PATH: str = str(BASE_DIR / "data" / "board.json")

    # DATABASE_URL / DATABASE_ACCESS_KEY - обязательны для relational провайдера.
    # Формат: postgresql+asyncpg://user@host:port/database
    # Для SQLite: sqlite+aiosqlite:///./board.db
    DATABASE_URL: str | None = None
    DATABASE_ACCESS_KEY: str | None = None

    # DATABASE_ECHO - выводить SQL запросы в логи (для отладки)
    DATABASE_ECHO: bool = False

    # BOARD_OWNER_ID - владелец строк в реляционной БД (все запросы фильтруются по нему)
    BOARD_OWNER_ID: str = "anonymous"

    DEFAULT_BOARD_NAME: str = "My Kanban Board"

    # =========================================================================
    # Logging
    # =========================================================================
    # LOG_LEVEL - уровень логирования: DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_LEVEL: str = "INFO"

    # LOG_FORMAT - "json" для production, "simple" для разработки
    LOG_FORMAT: str = "json"

    # =========================================================================
    # Authentication
    # =========================================================================
    # API_KEY - ключ для заголовка X-API-Key
    # В продакшене ОБЯЗАТЕЛЬНО установить через переменную окружения!
    API_KEY: str = "dev-api-key-change-in-production"

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE), env_file_encoding="utf-8", case_sensitive=True
    )


# Create global settings instance
settings = Settings()

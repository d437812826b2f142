"""
Data providers: the three repositories of one backend plus its lifecycle.

Выбор backend делается один раз при старте по конфигурации:

    provider = create_provider(settings)
    board = BoardSyncContext(provider)

BoardSyncContext видит только протокол DataProvider, поэтому третий
провайдер (memory для тестов) не требует изменений в контексте.
"""

from pathlib import Path

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from .core.config import Settings
from .core.database import build_database_url, create_engine, create_session_factory
from .core.errors import ConfigurationError, ConnectivityError
from .core.logging import get_logger
from .models import Base, ColumnRow
from .repositories import (
    EmbeddedColumnRepository,
    EmbeddedSettingsRepository,
    EmbeddedTaskRepository,
    KeyValueStore,
    RelationalColumnRepository,
    RelationalSettingsRepository,
    RelationalTaskRepository,
)

logger = get_logger(__name__)


class EmbeddedDataProvider:
    """
    Provider over a local key-value document.

    path=None - данные только в памяти (name="memory").
    Внешнего соединения нет, поэтому initialize/disconnect ничего не делают.
    """

    def __init__(self, path: str | Path | None = None):
        self.store = KeyValueStore(path)
        self.name = "embedded" if path else "memory"
        self.tasks = EmbeddedTaskRepository(self.store)
        self.columns = EmbeddedColumnRepository(self.store)
        self.settings = EmbeddedSettingsRepository(self.store)

    async def initialize(self) -> None:
        logger.info(
            "Provider initialized",
            extra={"provider": self.name, "path": str(self.store.path) if self.store.path else None},
        )

    async def disconnect(self) -> None:
        logger.info("Provider disconnected", extra={"provider": self.name})


class RelationalDataProvider:
    """
    Provider over a remote relational database, scoped to one owner.

    Args:
        database_url: SQLAlchemy URL (postgresql+asyncpg://..., sqlite+aiosqlite://...)
        access_key: Ключ доступа; подставляется как пароль, если его нет в URL
        owner_id: Владелец строк - все запросы фильтруются по нему
        echo: Логировать SQL

    Raises:
        ConfigurationError: URL или ключ не заданы (фатально, при создании)
    """

    name = "relational"

    def __init__(
        self,
        database_url: str | None,
        access_key: str | None,
        owner_id: str = "anonymous",
        echo: bool = False,
    ):
        if not database_url or not access_key:
            raise ConfigurationError(
                "Relational store credentials not configured. "
                "Set DATABASE_URL and DATABASE_ACCESS_KEY in your environment or config/.env"
            )

        self.owner_id = owner_id
        self.engine = create_engine(build_database_url(database_url, access_key), echo=echo)
        self.session_factory = create_session_factory(self.engine)

        self.tasks = RelationalTaskRepository(self.session_factory, owner_id)
        self.columns = RelationalColumnRepository(self.session_factory, owner_id)
        self.settings = RelationalSettingsRepository(self.session_factory, owner_id)

    async def initialize(self) -> None:
        """
        Verify connectivity with a lightweight read.

        SQL эквивалент:
            SELECT columns.id FROM columns LIMIT 1;

        Raises:
            ConnectivityError: БД недоступна или схема не создана
        """
        try:
            async with self.session_factory() as session:
                await session.execute(select(ColumnRow.id).limit(1))
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Connection check failed", extra={"provider": self.name, "error": str(e)})
            raise ConnectivityError(f"Relational store connection failed: {e}") from e

        logger.info("Provider initialized and connected", extra={"provider": self.name, "owner_id": self.owner_id})

    async def disconnect(self) -> None:
        """Dispose the engine. Safe to call more than once."""
        try:
            await self.engine.dispose()
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Engine dispose failed", extra={"provider": self.name, "error": str(e)})
        logger.info("Provider disconnected", extra={"provider": self.name})

    async def create_schema(self) -> None:
        """Create all tables (used by init_db.py and tests instead of migrations)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_schema(self) -> None:
        """Drop all tables (use with caution!)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)


def create_provider(config: Settings) -> EmbeddedDataProvider | RelationalDataProvider:
    """
    Build the provider selected by BOARD_BACKEND.

    Raises:
        ConfigurationError: неизвестный backend или нет реквизитов для relational
    """
    backend = config.BOARD_BACKEND

    if backend == "embedded":
        return EmbeddedDataProvider(config.EMBEDDED_STORE_PATH)
    if backend == "memory":
        return EmbeddedDataProvider(None)
    if backend == "relational":
        return RelationalDataProvider(
            config.DATABASE_URL,
            config.DATABASE_ACCESS_KEY,
            owner_id=config.BOARD_OWNER_ID,
            echo=config.DATABASE_ECHO,
        )

    raise ConfigurationError(f"Unknown board backend: {backend!r}")

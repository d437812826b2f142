"""
Pytest fixtures для тестов.

Предоставляет:
- memory_provider: embedded provider без файла (данные только в памяти)
- relational_provider: relational provider на SQLite in-memory
- flaky_provider: memory provider, у которого можно "сломать" отдельные методы
- board: запущенный BoardSyncContext поверх memory provider
- test_client: HTTP клиент для тестирования API endpoints
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from taskboard.api.dependencies import get_board
from taskboard.core.config import settings
from taskboard.main import app
from taskboard.providers import EmbeddedDataProvider, RelationalDataProvider
from taskboard.services import BoardSyncContext

from .factories import FlakyProvider

# Test database URL (SQLite in-memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_ACCESS_KEY = "test-key"
TEST_OWNER_ID = "user-1"


@pytest.fixture
def memory_provider() -> EmbeddedDataProvider:
    return EmbeddedDataProvider(None)


@pytest.fixture
def flaky_provider() -> FlakyProvider:
    return FlakyProvider()


@pytest_asyncio.fixture
async def relational_provider():
    """
    Relational provider поверх SQLite in-memory.

    create_engine выбирает StaticPool для SQLite: одно соединение
    на всё время теста, иначе in-memory БД теряет данные между сессиями.
    Таблицы создаются заново для каждого теста.
    """
    provider = RelationalDataProvider(TEST_DATABASE_URL, TEST_ACCESS_KEY, owner_id=TEST_OWNER_ID)
    await provider.create_schema()

    yield provider

    await provider.drop_schema()
    await provider.disconnect()


@pytest_asyncio.fixture
async def board(memory_provider):
    """Запущенный BoardSyncContext поверх пустого memory provider."""
    context = BoardSyncContext(memory_provider)
    await context.start()

    yield context

    await context.close()


@pytest_asyncio.fixture
async def test_client(board):
    """
    HTTP клиент для тестирования API endpoints.

    Lifespan при ASGITransport не запускается, поэтому контекст доски
    подставляется через dependency_overrides (и app.state для /health).
    """
    app.dependency_overrides[get_board] = lambda: board
    app.state.board = board

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-API-Key": settings.API_KEY},
    ) as client:
        yield client

    app.dependency_overrides.clear()
    app.state.board = None

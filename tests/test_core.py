"""
Тесты для core: выбор provider по настройкам и JSON логирование.
"""

import json
import logging

import pytest

from taskboard.core.config import Settings
from taskboard.core.errors import ConfigurationError
from taskboard.core.logging import JSONFormatter, SimpleFormatter, request_id_var
from taskboard.providers import EmbeddedDataProvider, RelationalDataProvider, create_provider

from .conftest import TEST_ACCESS_KEY, TEST_DATABASE_URL


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


# ============================================================================
# PROVIDER SELECTION
# ============================================================================


def test_create_embedded_provider(tmp_path):
    provider = create_provider(_settings(BOARD_BACKEND="embedded", EMBEDDED_STORE_PATH=str(tmp_path / "b.json")))

    assert isinstance(provider, EmbeddedDataProvider)
    assert provider.name == "embedded"


def test_create_memory_provider():
    provider = create_provider(_settings(BOARD_BACKEND="memory"))

    assert isinstance(provider, EmbeddedDataProvider)
    assert provider.name == "memory"


@pytest.mark.asyncio
async def test_create_relational_provider():
    provider = create_provider(
        _settings(
            BOARD_BACKEND="relational",
            DATABASE_URL=TEST_DATABASE_URL,
            DATABASE_ACCESS_KEY=TEST_ACCESS_KEY,
            BOARD_OWNER_ID="user-7",
        )
    )
    try:
        assert isinstance(provider, RelationalDataProvider)
        assert provider.name == "relational"
    finally:
        await provider.disconnect()


def test_relational_provider_without_credentials():
    """Test: relational без DATABASE_URL - ConfigurationError ещё до подключения."""
    with pytest.raises(ConfigurationError):
        create_provider(_settings(BOARD_BACKEND="relational", DATABASE_URL=None, DATABASE_ACCESS_KEY=None))


# ============================================================================
# LOGGING
# ============================================================================


def _record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("taskboard.services.board", logging.WARNING, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_and_request_id():
    token = request_id_var.set("req-123")
    try:
        line = JSONFormatter().format(_record("Task refresh failed", provider="memory", kind="backend"))
    finally:
        request_id_var.reset(token)

    data = json.loads(line)
    assert data["level"] == "WARNING"
    assert data["logger"] == "taskboard.services.board"
    assert data["message"] == "Task refresh failed"
    assert data["request_id"] == "req-123"
    assert data["extra"] == {"provider": "memory", "kind": "backend"}


def test_json_formatter_without_extra():
    data = json.loads(JSONFormatter().format(_record("Board ready")))

    assert "extra" not in data
    assert "request_id" not in data


def test_simple_formatter_appends_extra():
    line = SimpleFormatter().format(_record("Theme load failed", kind="backend"))

    assert "WARNING" in line
    assert line.endswith("Theme load failed | kind=backend")

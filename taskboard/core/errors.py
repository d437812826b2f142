"""Exceptions raised outside the Result envelope.

Ожидаемые ошибки (not found, недоступный backend, невалидный импорт)
возвращаются через Result. Исключения остаются только для:
- конфигурации, без которой провайдер нельзя создать (фатально)
- проверки соединения в initialize()
"""


class BoardError(Exception):
    """Base class for taskboard exceptions."""


class ConfigurationError(BoardError):
    """
    Provider cannot be constructed from the given settings.

    Пример:
        RelationalDataProvider(database_url=None, access_key="...")
        # ConfigurationError: Relational store credentials not configured...
    """


class ConnectivityError(BoardError):
    """Provider.initialize() could not reach its backend."""

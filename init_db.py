"""
Скрипт для инициализации реляционной базы данных.

Создаёт таблицы tasks, columns, user_settings напрямую через SQLAlchemy
по DATABASE_URL / DATABASE_ACCESS_KEY из окружения или config/.env.

    DATABASE_URL=postgresql+asyncpg://board@localhost/board DATABASE_ACCESS_KEY=... python init_db.py
"""

import asyncio

from taskboard.core.config import settings
from taskboard.providers import RelationalDataProvider


async def main():
    """Создать все таблицы."""
    provider = RelationalDataProvider(
        settings.DATABASE_URL,
        settings.DATABASE_ACCESS_KEY,
        owner_id=settings.BOARD_OWNER_ID,
        echo=settings.DATABASE_ECHO,
    )
    print("Создание таблиц...")
    try:
        await provider.create_schema()
    finally:
        await provider.disconnect()
    print("✓ Таблицы созданы успешно!")


if __name__ == "__main__":
    asyncio.run(main())

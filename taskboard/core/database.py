"""Async SQLAlchemy engine and session factory for the relational store."""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool


def build_database_url(database_url: str, access_key: str) -> str:
    """
    Подставить access key как пароль, если в URL его нет.

    Пример:
        build_database_url("postgresql+asyncpg://board@db:5432/board", "s3cret")
        # postgresql+asyncpg://board:s3cret@db:5432/board
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" and not url.password:
        url = url.set(password=access_key)
    return url.render_as_string(hide_password=False)


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    Для SQLite используем StaticPool (одно соединение - иначе in-memory БД
    теряет данные между сессиями), для PostgreSQL - NullPool.
    """
    if "sqlite" in database_url:
        return create_async_engine(
            database_url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(database_url, echo=echo, poolclass=NullPool)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory: one short-lived session per repository call."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

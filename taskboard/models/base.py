"""Base classes for SQLAlchemy models."""

from datetime import UTC, datetime

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    """Return current UTC datetime (naive, for SQLite compatibility)."""
    return datetime.now(UTC).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class OwnedMixin:
    """
    Каждая строка принадлежит владельцу; все запросы фильтруются по owner_id.

    owner_id входит в первичный ключ (owner_id, id): session.get/merge ищут
    строку только среди строк владельца, а одинаковые id у разных владельцев
    не конфликтуют.
    """

    owner_id: Mapped[str] = mapped_column(String(64), primary_key=True)

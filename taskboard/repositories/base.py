"""Base repository with owner-scoped CRUD operations for the relational store."""

import functools
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, delete, select
from sqlalchemy.exc import NoResultFound, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..core.logging import get_logger
from ..core.result import ErrorInfo, Result
from ..models.base import Base

logger = get_logger(__name__)

# TypeVar для Generic класса - позволяет работать с любой моделью
RowType = TypeVar("RowType", bound=Base)


def sql_operation(func: Callable) -> Callable:
    """
    Convert driver errors raised inside a repository call into a backend failure Result.

    ValueError ловим тоже: строка из БД, которая не проходит валидацию
    сущности (например, отрицательные points), - это проблема backend,
    а не программы.
    """

    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await func(self, *args, **kwargs)
        except (SQLAlchemyError, OSError, ValueError) as e:
            logger.warning(
                "Relational store query failed",
                extra={"operation": func.__name__, "owner_id": self.owner_id, "error": str(e)},
            )
            return Result.failure(ErrorInfo.from_exception(e))

    return wrapper


class OwnedRepository(Generic[RowType]):
    """
    Базовый репозиторий, привязанный к владельцу.

    Каждый запрос неявно фильтруется по owner_id, каждая записанная строка
    его содержит. Сессия открывается на одну операцию: контракт репозитория
    не знает о транзакциях, поэтому каждый вызов коммитится сам.

    Пример:
        repo = OwnedRepository[TaskRow](TaskRow, session_factory, "user-1")
        row = await repo.fetch_one("task-1")
    """

    def __init__(
        self,
        model: type[RowType],
        session_factory: async_sessionmaker[AsyncSession],
        owner_id: str,
    ):
        self.model = model
        self.session_factory = session_factory
        self.owner_id = owner_id

    def scoped(self) -> Select:
        """SELECT * FROM table WHERE owner_id = {owner_id}"""
        return select(self.model).where(self.model.owner_id == self.owner_id)

    async def fetch_all(self, query: Select) -> list[RowType]:
        async with self.session_factory() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def fetch_one(self, row_id: str) -> RowType | None:
        """
        Get a row by id.

        NoResultFound - это "строка не найдена", а не ошибка:
        возвращаем None, и репозиторий отдаёт Result(None, None).
        """
        async with self.session_factory() as session:
            result = await session.execute(self.scoped().where(self.model.id == row_id))
            try:
                return result.scalar_one()
            except NoResultFound:
                return None

    async def insert(self, values: dict[str, Any]) -> RowType:
        async with self.session_factory() as session:
            row = self.model(**values)
            session.add(row)
            await session.flush()
            await session.refresh(row)
            await session.commit()
            return row

    async def replace(self, row_id: str, values: dict[str, Any]) -> RowType | None:
        """
        Full replace of the row with the given id.

        Returns:
            Updated row or None if no row of this owner has the id
        """
        async with self.session_factory() as session:
            result = await session.execute(self.scoped().where(self.model.id == row_id))
            row = result.scalar_one_or_none()
            if row is None:
                return None

            for key, value in values.items():
                setattr(row, key, value)

            await session.commit()
            return row

    async def remove(self, row_id: str) -> None:
        """DELETE FROM table WHERE id = {row_id} AND owner_id = {owner_id}"""
        async with self.session_factory() as session:
            await session.execute(
                delete(self.model).where(
                    self.model.id == row_id,
                    self.model.owner_id == self.owner_id,
                )
            )
            await session.commit()

"""Column repository for the relational store."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..core.result import ErrorInfo, ErrorKind, Result
from ..models import ColumnRow
from ..schemas import Column
from .base import OwnedRepository, sql_operation
from .mapping import column_from_row, column_to_row


class RelationalColumnRepository(OwnedRepository[ColumnRow]):
    """ColumnRepository поверх таблицы columns."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], owner_id: str):
        super().__init__(ColumnRow, session_factory, owner_id)

    @sql_operation
    async def get_columns(self) -> Result[list[Column]]:
        rows = await self.fetch_all(self.scoped().order_by(ColumnRow.order.asc()))
        return Result.success([column_from_row(row) for row in rows])

    @sql_operation
    async def get_column_by_id(self, column_id: str) -> Result[Column]:
        row = await self.fetch_one(column_id)
        return Result.success(column_from_row(row) if row is not None else None)

    @sql_operation
    async def create_column(self, column: Column) -> Result[Column]:
        row = await self.insert(column_to_row(column, self.owner_id))
        return Result.success(column_from_row(row))

    @sql_operation
    async def update_column(self, column: Column) -> Result[Column]:
        row = await self.replace(column.id, column_to_row(column, self.owner_id))
        if row is None:
            return Result.failure(
                ErrorInfo(ErrorKind.NOT_FOUND, f"Column with id={column.id} not found")
            )
        return Result.success(column_from_row(row))

    @sql_operation
    async def delete_column(self, column_id: str) -> Result[None]:
        await self.remove(column_id)
        return Result.success()

    @sql_operation
    async def reorder_columns(self, columns: list[Column]) -> Result[list[Column]]:
        """
        Batch upsert of {id, owner_id, name, color, order=index} in one transaction.

        merge() делает INSERT или UPDATE по первичному ключу (owner_id, id),
        поэтому чужие строки не затрагиваются; работает одинаково на
        PostgreSQL и SQLite.
        """
        async with self.session_factory() as session:
            for index, column in enumerate(columns):
                await session.merge(ColumnRow(**column_to_row(column, self.owner_id, order=index)))
            await session.commit()

        return Result.success(
            [column.model_copy(update={"order": index}) for index, column in enumerate(columns)]
        )

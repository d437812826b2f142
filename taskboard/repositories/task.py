"""Task repository for the relational store."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..core.result import ErrorInfo, ErrorKind, Result
from ..models import TaskRow
from ..schemas import Task
from .base import OwnedRepository, sql_operation
from .mapping import task_from_row, task_to_row


class RelationalTaskRepository(OwnedRepository[TaskRow]):
    """
    TaskRepository поверх таблицы tasks.

    Списки упорядочены по created_at - порядок внутри колонки
    восстанавливает нормализатор в BoardSyncContext.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], owner_id: str):
        super().__init__(TaskRow, session_factory, owner_id)

    @sql_operation
    async def get_tasks(self) -> Result[list[Task]]:
        rows = await self.fetch_all(self.scoped().order_by(TaskRow.created_at.asc()))
        return Result.success([task_from_row(row) for row in rows])

    @sql_operation
    async def get_task_by_id(self, task_id: str) -> Result[Task]:
        row = await self.fetch_one(task_id)
        return Result.success(task_from_row(row) if row is not None else None)

    @sql_operation
    async def create_task(self, task: Task) -> Result[Task]:
        row = await self.insert(task_to_row(task, self.owner_id))
        return Result.success(task_from_row(row))

    @sql_operation
    async def update_task(self, task: Task) -> Result[Task]:
        row = await self.replace(task.id, task_to_row(task, self.owner_id))
        if row is None:
            return Result.failure(
                ErrorInfo(ErrorKind.NOT_FOUND, f"Task with id={task.id} not found")
            )
        return Result.success(task_from_row(row))

    @sql_operation
    async def delete_task(self, task_id: str) -> Result[None]:
        await self.remove(task_id)
        return Result.success()

    @sql_operation
    async def get_tasks_by_column(self, column_id: str) -> Result[list[Task]]:
        rows = await self.fetch_all(
            self.scoped().where(TaskRow.column_id == column_id).order_by(TaskRow.created_at.asc())
        )
        return Result.success([task_from_row(row) for row in rows])

"""Board synchronization context: the cache the UI renders and the only writer of it."""

import asyncio
import uuid
from collections.abc import Awaitable, Callable, Coroutine, Sequence
from functools import partial
from typing import Any, TypeVar

from ..core.errors import BoardError
from ..core.logging import get_logger
from ..core.result import BatchResult, ErrorInfo, ErrorKind, Result
from ..repositories.contracts import DataProvider
from ..schemas import Board, Column, Priority, Task, Theme
from .batch import BatchStep, run_batch
from .ordering import (
    changed_order,
    move_before,
    move_to_column,
    next_order,
    normalize_task_order,
    tasks_in_column,
)
from .transfer import build_export_document

logger = get_logger(__name__)

T = TypeVar("T")

ThemeListener = Callable[[Theme], None]


class BoardSyncContext:
    """
    Кэш доски поверх DataProvider.

    Держит:
    - tasks / columns / theme - то, что рендерит UI
    - is_loading - идёт начальная загрузка (refresh_all)
    - error - ошибка инициализации или первая непогашенная ошибка загрузки
      (ошибка задач держится, пока задачи не загрузятся успешно)

    Два пути записи:
    1. create/update/delete -> запись в provider -> refresh коллекции (канонические данные)
    2. move/reorder -> сразу set_*_optimistic -> запись в provider следом

    Пути не согласуются между собой: refresh, завершившийся после устаревшего
    чтения, может перезаписать оптимистичное состояние. Одна доска - один
    активный редактор, блокировок нет.

    Использование:
        async with BoardSyncContext(create_provider(settings)) as board:
            await board.add_column("To Do", "oklch(0.45 0.15 285)")
            print(board.columns)
    """

    def __init__(self, provider: DataProvider, on_theme_change: ThemeListener | None = None):
        """
        Args:
            provider: Любая реализация DataProvider (embedded, relational, memory)
            on_theme_change: Вызывается, когда тема реально применена
                (слой представления переключает стили)
        """
        self.provider = provider
        self.on_theme_change = on_theme_change

        self.tasks: list[Task] = []
        self.columns: list[Column] = []
        self.theme: Theme = Theme.LIGHT
        self.is_loading: bool = True
        self.error: ErrorInfo | None = None
        # Ошибка последней загрузки каждой коллекции; error - первая из них
        self._load_errors: dict[str, ErrorInfo | None] = {"tasks": None, "columns": None}

        # Ссылки на фоновые задачи нормализации, иначе их соберёт GC
        self._background: set[asyncio.Task] = set()

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    async def start(self) -> None:
        """Initialize the provider and load everything. Failures end up in `error`."""
        try:
            await self.provider.initialize()
        except BoardError as e:
            self.error = ErrorInfo.from_exception(e, ErrorKind.CONNECTIVITY)
            self.is_loading = False
            logger.error(
                "Board initialization failed",
                extra={"provider": self.provider.name, "error": str(e)},
            )
            return

        await self.refresh_all()

    async def close(self) -> None:
        """Wait for pending background writes, then disconnect the provider."""
        await self.wait_for_background()
        await self.provider.disconnect()

    async def __aenter__(self) -> "BoardSyncContext":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # =========================================================================
    # CACHE READS
    # =========================================================================

    def find_task(self, task_id: str) -> Task | None:
        return next((task for task in self.tasks if task.id == task_id), None)

    def find_column(self, column_id: str) -> Column | None:
        return next((column for column in self.columns if column.id == column_id), None)

    def tasks_in_column(self, column_id: str) -> list[Task]:
        return tasks_in_column(self.tasks, column_id)

    def ordered_columns(self) -> list[Column]:
        return sorted(self.columns, key=lambda column: column.order)

    # =========================================================================
    # REFRESH
    # =========================================================================

    async def refresh_tasks(self) -> None:
        """
        Read all tasks, normalize their order and replace the cache.

        При ошибке чтения кэш не трогаем (stale-but-available), ошибку запоминаем.
        Если нормализация что-то поменяла - изменённые задачи пишутся обратно
        в фоне; UI сразу видит нормализованное состояние.
        """
        self._record_load_errors(tasks=await self._load_tasks())

    async def refresh_columns(self) -> None:
        """Read all columns and replace the cache; same failure semantics as tasks."""
        self._record_load_errors(columns=await self._load_columns())

    async def refresh_theme(self) -> None:
        result = await self.provider.settings.get_theme()
        if not result.ok:
            logger.warning(
                "Error loading theme",
                extra={"provider": self.provider.name, "error": result.error.message},
            )
            return
        if result.data:
            self._apply_theme(result.data)

    async def refresh_all(self) -> None:
        """
        Refresh tasks, columns and theme concurrently under one loading flag.

        Загрузка заканчивается, когда завершились все три, независимо от исхода.
        В error остаётся первая ошибка (успешное чтение колонок не стирает
        ошибку чтения задач).
        """
        self.is_loading = True
        self.error = None
        try:
            task_error, column_error, _ = await asyncio.gather(
                self._load_tasks(), self._load_columns(), self.refresh_theme()
            )
            self._record_load_errors(tasks=task_error, columns=column_error)
        finally:
            self.is_loading = False

    async def _refresh_entities(self) -> None:
        """Re-read tasks and columns; the first failure wins the error slot."""
        task_error, column_error = await asyncio.gather(self._load_tasks(), self._load_columns())
        self._record_load_errors(tasks=task_error, columns=column_error)

    def _record_load_errors(self, **errors: ErrorInfo | None) -> None:
        """Remember load errors per collection; `error` is the first one still standing."""
        self._load_errors.update(errors)
        self.error = next((error for error in self._load_errors.values() if error is not None), None)

    async def _load_tasks(self) -> ErrorInfo | None:
        result = await self.provider.tasks.get_tasks()
        if not result.ok:
            self._log_load_error("Error loading tasks", result.error)
            return result.error

        normalized, changed = normalize_task_order(result.data or [])
        self.tasks = normalized

        if changed:
            logger.info(
                "Normalizing task order in storage",
                extra={"provider": self.provider.name, "changed": len(changed)},
            )
            self._spawn(self._persist_normalized(changed))
        return None

    async def _load_columns(self) -> ErrorInfo | None:
        result = await self.provider.columns.get_columns()
        if not result.ok:
            self._log_load_error("Error loading columns", result.error)
            return result.error

        self.columns = list(result.data or [])
        return None

    def set_tasks_optimistic(self, tasks: Sequence[Task]) -> None:
        """Replace the task cache without reading the backend."""
        self.tasks = list(tasks)

    def set_columns_optimistic(self, columns: Sequence[Column]) -> None:
        """Replace the column cache without reading the backend."""
        self.columns = list(columns)

    # =========================================================================
    # TASKS
    # =========================================================================

    async def get_task_by_id(self, task_id: str) -> Result[Task]:
        return await self.provider.tasks.get_task_by_id(task_id)

    async def create_task(self, task: Task) -> Result[Task]:
        result = await self.provider.tasks.create_task(task)
        return await self._after_write("create task", result, self.refresh_tasks)

    async def add_task(
        self,
        column_id: str,
        title: str,
        description: str = "",
        points: int = 0,
        tags: list[str] | None = None,
        priority: Priority = Priority.MEDIUM,
    ) -> Result[Task]:
        """Create a task at the end of the column (next free order)."""
        task = Task(
            id=f"task-{uuid.uuid4().hex}",
            title=title,
            description=description,
            points=points,
            tags=tags or [],
            column_id=column_id,
            priority=priority,
            order=next_order(self.tasks, column_id),
        )
        return await self.create_task(task)

    async def update_task(self, task: Task) -> Result[Task]:
        result = await self.provider.tasks.update_task(task)
        return await self._after_write("update task", result, self.refresh_tasks)

    async def update_task_silent(self, task: Task) -> Result[Task]:
        """Persist a task without refreshing the cache (caller keeps its optimistic state)."""
        result = await self.provider.tasks.update_task(task)
        if not result.ok:
            self._notify_failure("update task", result.error)
        return result

    async def delete_task(self, task_id: str) -> Result[None]:
        result = await self.provider.tasks.delete_task(task_id)
        return await self._after_write("delete task", result, self.refresh_tasks)

    async def move_task_to_column(self, task_id: str, target_column_id: str) -> Result[Task] | None:
        """
        Move a task to the end of another column.

        Кэш обновляется сразу (оптимистично), запись в provider - следом.
        При ошибке записи кэш остаётся впереди backend до следующего refresh.

        Returns:
            Result of the durable update, or None if the move is a no-op
        """
        moved = move_to_column(self.tasks, task_id, target_column_id)
        if moved is None:
            return None

        tasks, task = moved
        self.set_tasks_optimistic(tasks)
        return await self.update_task_silent(task)

    async def reorder_task(self, task_id: str, target_task_id: str) -> BatchResult[Task] | None:
        """
        Move a task to the target task's position inside the same column.

        Returns:
            BatchResult of the per-task updates (stops at the first failure),
            or None if the move is a no-op
        """
        task = self.find_task(task_id)
        if task is None:
            return None

        column_tasks = self.tasks_in_column(task.column_id)
        reordered = move_before(column_tasks, task_id, target_task_id)
        if reordered is None:
            return None

        replacements = iter(reordered)
        self.set_tasks_optimistic(
            [next(replacements) if item.column_id == task.column_id else item for item in self.tasks]
        )

        steps = [
            BatchStep(item, partial(self.provider.tasks.update_task, item))
            for item in changed_order(column_tasks, reordered)
        ]
        batch = await run_batch(steps)
        if not batch.ok:
            self._notify_failure("reorder tasks", batch.error)
        return batch

    async def move_task(
        self, task_id: str, target_column_id: str, target_task_id: str | None = None
    ) -> Result[Task] | BatchResult[Task] | None:
        """Drop handler: another column appends, same column with a target reorders."""
        task = self.find_task(task_id)
        if task is None:
            return None
        if task.column_id != target_column_id:
            return await self.move_task_to_column(task_id, target_column_id)
        if target_task_id is None:
            return None
        return await self.reorder_task(task_id, target_task_id)

    # =========================================================================
    # COLUMNS
    # =========================================================================

    async def get_column_by_id(self, column_id: str) -> Result[Column]:
        return await self.provider.columns.get_column_by_id(column_id)

    async def create_column(self, column: Column) -> Result[Column]:
        result = await self.provider.columns.create_column(column)
        return await self._after_write("create column", result, self.refresh_columns)

    async def add_column(self, name: str, color: str) -> Result[Column]:
        """Create a column at the end of the column sequence."""
        column = Column(id=f"col-{uuid.uuid4().hex}", name=name, color=color, order=len(self.columns))
        return await self.create_column(column)

    async def update_column(self, column: Column) -> Result[Column]:
        result = await self.provider.columns.update_column(column)
        return await self._after_write("update column", result, self.refresh_columns)

    async def delete_column(self, column_id: str, delete_tasks: bool = False) -> BatchResult[str]:
        """
        Delete a column, optionally deleting its tasks first.

        Каскад не автоматический: без delete_tasks задачи остаются
        со ссылкой на удалённую колонку.

        Returns:
            BatchResult with labels of applied/pending deletes
            ("task <id>" ..., "column <id>")
        """
        steps: list[BatchStep[str]] = []

        if delete_tasks:
            tasks_result = await self.provider.tasks.get_tasks_by_column(column_id)
            if not tasks_result.ok:
                self._notify_failure("delete column", tasks_result.error)
                return BatchResult(pending=[f"column {column_id}"], error=tasks_result.error)
            steps.extend(
                BatchStep(f"task {task.id}", partial(self.provider.tasks.delete_task, task.id))
                for task in tasks_result.data or []
            )

        steps.append(
            BatchStep(f"column {column_id}", partial(self.provider.columns.delete_column, column_id))
        )

        batch = await run_batch(steps)
        if not batch.ok:
            self._notify_failure("delete column", batch.error)
        if batch.applied:
            await self._refresh_entities()
        return batch

    async def reorder_columns(self, columns: Sequence[Column]) -> Result[list[Column]]:
        result = await self.provider.columns.reorder_columns(list(columns))
        return await self._after_write("reorder columns", result, self.refresh_columns)

    async def move_column(self, column_id: str, target_column_id: str) -> Result[list[Column]] | None:
        """
        Drag-and-drop of a column onto another column's position.

        Returns:
            Result of the durable reorder, or None if the move is a no-op
        """
        reordered = move_before(self.ordered_columns(), column_id, target_column_id)
        if reordered is None:
            return None

        self.set_columns_optimistic(reordered)
        return await self.reorder_columns(reordered)

    # =========================================================================
    # THEME
    # =========================================================================

    async def set_theme(self, theme: Theme) -> Result[Theme]:
        """Persist the theme; cache and presentation change only if the write succeeds."""
        result = await self.provider.settings.set_theme(theme)
        if result.ok:
            self._apply_theme(result.data or Theme(theme))
        else:
            self._notify_failure("set theme", result.error)
        return result

    async def toggle_theme(self) -> Result[Theme]:
        return await self.set_theme(Theme.DARK if self.theme == Theme.LIGHT else Theme.LIGHT)

    # =========================================================================
    # EXPORT / IMPORT
    # =========================================================================

    def export_board(self, board_name: str) -> dict[str, Any]:
        """Export document of the cached board."""
        return build_export_document(self.ordered_columns(), self.tasks, board_name)

    async def import_board(self, board: Board) -> BatchResult[str]:
        """
        Replace the whole board with the imported one.

        Порядок: удалить все задачи -> удалить все колонки -> создать колонки
        -> создать задачи. Каждый шаг последовательный, останавливаемся на
        первой ошибке. После импорта (успешного или нет) кэш перечитывается.
        """
        tasks_result, columns_result = await asyncio.gather(
            self.provider.tasks.get_tasks(), self.provider.columns.get_columns()
        )
        for result in (tasks_result, columns_result):
            if not result.ok:
                self._notify_failure("import board", result.error)
                return BatchResult(error=result.error)

        steps: list[BatchStep[str]] = [
            BatchStep(f"delete task {task.id}", partial(self.provider.tasks.delete_task, task.id))
            for task in tasks_result.data or []
        ]
        steps += [
            BatchStep(f"delete column {column.id}", partial(self.provider.columns.delete_column, column.id))
            for column in columns_result.data or []
        ]
        steps += [
            BatchStep(f"create column {column.id}", partial(self.provider.columns.create_column, column))
            for column in board.columns
        ]
        steps += [
            BatchStep(f"create task {task.id}", partial(self.provider.tasks.create_task, task))
            for task in board.tasks
        ]

        batch = await run_batch(steps)
        if batch.ok:
            logger.info(
                "Board imported",
                extra={"columns": len(board.columns), "tasks": len(board.tasks)},
            )
        else:
            self._notify_failure("import board", batch.error)

        await self._refresh_entities()
        return batch

    # =========================================================================
    # BACKGROUND WRITES
    # =========================================================================

    async def wait_for_background(self) -> None:
        """Join pending normalization writes (tests, shutdown)."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background_done)

    def _background_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(
                "Background write crashed",
                exc_info=task.exception(),
                extra={"provider": self.provider.name},
            )

    async def _persist_normalized(self, tasks: list[Task]) -> None:
        """Best-effort write-back of normalized orders. Failures are only logged."""
        results = await asyncio.gather(
            *(self.provider.tasks.update_task(task) for task in tasks), return_exceptions=True
        )
        failures = [
            str(result) if isinstance(result, BaseException) else result.error.message
            for result in results
            if isinstance(result, BaseException) or not result.ok
        ]
        if failures:
            logger.warning(
                "Error normalizing task order",
                extra={
                    "provider": self.provider.name,
                    "failed": len(failures),
                    "total": len(tasks),
                    "first_error": failures[0],
                },
            )

    # =========================================================================
    # HELPERS
    # =========================================================================

    async def _after_write(
        self, action: str, result: Result[T], refresh: Callable[[], Awaitable[None]]
    ) -> Result[T]:
        if result.ok:
            await refresh()
        else:
            self._notify_failure(action, result.error)
        return result

    def _apply_theme(self, theme: Theme) -> None:
        self.theme = Theme(theme)
        if self.on_theme_change is not None:
            self.on_theme_change(self.theme)

    def _log_load_error(self, message: str, error: ErrorInfo) -> None:
        logger.error(
            message,
            extra={"provider": self.provider.name, "kind": error.kind.value, "error": error.message},
        )

    def _notify_failure(self, action: str, error: ErrorInfo) -> None:
        logger.warning(
            f"Failed to {action}: {error.message}",
            extra={"provider": self.provider.name, "kind": error.kind.value},
        )

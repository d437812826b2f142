"""
API endpoints для задач.

Чтение списка идёт из кэша BoardSyncContext (то, что видит UI),
чтение по id - из provider. Запись - через контекст, который
сам перечитывает данные или обновляет кэш оптимистично.
"""

from fastapi import APIRouter, Depends, Query, Response, status

from ..core.result import BatchResult
from ..schemas import Task
from ..services import BoardSyncContext
from .dependencies import ensure_applied, get_board, unwrap
from .errors import BadRequestError, NotFoundError
from .schemas import BatchResponse, ErrorResponse, MoveResponse, TaskCreate, TaskMove, TaskUpdate

router = APIRouter(prefix="/tasks", tags=["tasks"])


# ============================================================================
# READ
# ============================================================================


@router.get("", response_model=list[Task], summary="Задачи доски")
async def list_tasks(
    column_id: str | None = Query(None, alias="columnId", description="Только задачи колонки, по order"),
    board: BoardSyncContext = Depends(get_board),
) -> list[Task]:
    """
    Задачи из кэша.

    Примеры:
    ```
    GET /tasks                  # все задачи
    GET /tasks?columnId=col-1   # задачи колонки в порядке order
    ```
    """
    if column_id is not None:
        return board.tasks_in_column(column_id)
    return board.tasks


@router.get(
    "/{task_id}",
    response_model=Task,
    summary="Задача по id",
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def get_task(task_id: str, board: BoardSyncContext = Depends(get_board)) -> Task:
    task = unwrap(await board.get_task_by_id(task_id))
    if task is None:
        raise NotFoundError("Task", task_id)
    return task


# ============================================================================
# WRITE
# ============================================================================


@router.post(
    "",
    response_model=Task,
    status_code=status.HTTP_201_CREATED,
    summary="Создать задачу",
    description="Задача добавляется в конец колонки (следующий свободный order).",
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def create_task(data: TaskCreate, board: BoardSyncContext = Depends(get_board)) -> Task:
    if board.find_column(data.column_id) is None:
        raise BadRequestError(f"Column {data.column_id} does not exist")

    return unwrap(
        await board.add_task(
            column_id=data.column_id,
            title=data.title,
            description=data.description,
            points=data.points,
            tags=data.tags,
            priority=data.priority,
        )
    )


@router.put(
    "/{task_id}",
    response_model=Task,
    summary="Обновить задачу",
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def update_task(
    task_id: str, data: TaskUpdate, board: BoardSyncContext = Depends(get_board)
) -> Task:
    """Частичное обновление: непереданные поля берутся из текущей задачи."""
    current = board.find_task(task_id)
    if current is None:
        raise NotFoundError("Task", task_id)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    updated = Task.model_validate({**current.model_dump(), **changes})
    return unwrap(await board.update_task(updated))


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удалить задачу",
    responses={503: {"model": ErrorResponse}},
)
async def delete_task(task_id: str, board: BoardSyncContext = Depends(get_board)) -> Response:
    unwrap(await board.delete_task(task_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============================================================================
# DRAG AND DROP
# ============================================================================


@router.post(
    "/{task_id}/move",
    response_model=MoveResponse,
    summary="Переместить задачу",
    description="""
    Drop задачи.

    - columnId другой колонки: задача уходит в конец этой колонки
    - та же колонка + targetTaskId: задача встаёт на место targetTaskId

    moved=false - перемещать нечего (та же позиция).
    """,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def move_task(
    task_id: str, data: TaskMove, board: BoardSyncContext = Depends(get_board)
) -> MoveResponse:
    if board.find_task(task_id) is None:
        raise NotFoundError("Task", task_id)
    if board.find_column(data.column_id) is None:
        raise BadRequestError(f"Column {data.column_id} does not exist")

    outcome = await board.move_task(task_id, data.column_id, data.target_task_id)
    if outcome is None:
        return MoveResponse(moved=False, task=board.find_task(task_id))

    if isinstance(outcome, BatchResult):
        ensure_applied(outcome)
        return MoveResponse(moved=True, task=board.find_task(task_id), batch=BatchResponse.from_batch(outcome))

    return MoveResponse(moved=True, task=unwrap(outcome))

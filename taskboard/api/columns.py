"""API endpoints для колонок доски."""

from fastapi import APIRouter, Depends, Query, status

from ..schemas import Column
from ..services import BoardSyncContext
from .dependencies import ensure_applied, get_board, unwrap
from .errors import NotFoundError
from .schemas import BatchResponse, ColumnCreate, ColumnMove, ColumnUpdate, ErrorResponse

router = APIRouter(prefix="/columns", tags=["columns"])


@router.get("", response_model=list[Column], summary="Колонки доски по order")
async def list_columns(board: BoardSyncContext = Depends(get_board)) -> list[Column]:
    return board.ordered_columns()


@router.get(
    "/{column_id}",
    response_model=Column,
    summary="Колонка по id",
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def get_column(column_id: str, board: BoardSyncContext = Depends(get_board)) -> Column:
    column = unwrap(await board.get_column_by_id(column_id))
    if column is None:
        raise NotFoundError("Column", column_id)
    return column


@router.post(
    "",
    response_model=Column,
    status_code=status.HTTP_201_CREATED,
    summary="Создать колонку",
    description="Колонка добавляется последней (order = число колонок).",
    responses={503: {"model": ErrorResponse}},
)
async def create_column(data: ColumnCreate, board: BoardSyncContext = Depends(get_board)) -> Column:
    return unwrap(await board.add_column(data.name, data.color))


@router.put(
    "/{column_id}",
    response_model=Column,
    summary="Переименовать / перекрасить колонку",
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def update_column(
    column_id: str, data: ColumnUpdate, board: BoardSyncContext = Depends(get_board)
) -> Column:
    current = board.find_column(column_id)
    if current is None:
        raise NotFoundError("Column", column_id)

    updated = current.model_copy(update=data.model_dump(exclude_unset=True, exclude_none=True))
    return unwrap(await board.update_column(updated))


@router.delete(
    "/{column_id}",
    response_model=BatchResponse,
    summary="Удалить колонку",
    description="""
    Удалить колонку.

    deleteTasks=true - сначала удаляются задачи колонки (по одной, до первой ошибки).
    Без флага задачи остаются и ссылаются на удалённую колонку.

    Частично выполненное удаление возвращает 409 PARTIAL_BATCH.
    """,
    responses={409: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def delete_column(
    column_id: str,
    delete_tasks: bool = Query(False, alias="deleteTasks"),
    board: BoardSyncContext = Depends(get_board),
) -> BatchResponse:
    batch = ensure_applied(await board.delete_column(column_id, delete_tasks=delete_tasks))
    return BatchResponse.from_batch(batch)


@router.post(
    "/{column_id}/move",
    response_model=list[Column],
    summary="Переместить колонку",
    description="Колонка встаёт на место targetColumnId; order всех колонок пересчитывается.",
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def move_column(
    column_id: str, data: ColumnMove, board: BoardSyncContext = Depends(get_board)
) -> list[Column]:
    for required in (column_id, data.target_column_id):
        if board.find_column(required) is None:
            raise NotFoundError("Column", required)

    result = await board.move_column(column_id, data.target_column_id)
    if result is not None:
        unwrap(result)
    return board.ordered_columns()

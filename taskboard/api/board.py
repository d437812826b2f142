"""
API endpoints доски целиком: состояние, тема, экспорт и импорт.

Импорт в два шага, как в UI:
1. POST /board/import/preview - проверка файла, счётчики и ошибки
2. POST /board/import - замена всей доски содержимым файла
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, Request

from ..core.config import settings
from ..services import BoardSyncContext, parse_board_document
from .dependencies import ensure_applied, get_board, unwrap
from .errors import BadRequestError
from .schemas import (
    BatchResponse,
    BoardState,
    ErrorInfoResponse,
    ErrorResponse,
    ImportPreviewResponse,
    ThemeUpdate,
)

router = APIRouter(prefix="/board", tags=["board"])


def _state(board: BoardSyncContext) -> BoardState:
    return BoardState(
        provider=board.provider.name,
        is_loading=board.is_loading,
        theme=board.theme,
        error=ErrorInfoResponse.from_error(board.error),
        columns=board.ordered_columns(),
        tasks=board.tasks,
    )


@router.get("", response_model=BoardState, summary="Состояние доски")
async def get_board_state(board: BoardSyncContext = Depends(get_board)) -> BoardState:
    """Кэш контекста: колонки, задачи, тема и последняя ошибка загрузки."""
    return _state(board)


@router.post("/refresh", response_model=BoardState, summary="Перечитать доску")
async def refresh_board(board: BoardSyncContext = Depends(get_board)) -> BoardState:
    """
    Перечитать задачи, колонки и тему из provider.

    Ошибка чтения не превращается в HTTP ошибку: кэш остаётся прежним,
    ошибка видна в поле error.
    """
    await board.refresh_all()
    return _state(board)


# ============================================================================
# THEME
# ============================================================================


@router.put(
    "/theme",
    response_model=ThemeUpdate,
    summary="Сменить тему",
    responses={503: {"model": ErrorResponse}},
)
async def set_theme(data: ThemeUpdate, board: BoardSyncContext = Depends(get_board)) -> ThemeUpdate:
    return ThemeUpdate(theme=unwrap(await board.set_theme(data.theme)))


@router.post(
    "/theme/toggle",
    response_model=ThemeUpdate,
    summary="Переключить тему light/dark",
    responses={503: {"model": ErrorResponse}},
)
async def toggle_theme(board: BoardSyncContext = Depends(get_board)) -> ThemeUpdate:
    return ThemeUpdate(theme=unwrap(await board.toggle_theme()))


# ============================================================================
# EXPORT / IMPORT
# ============================================================================


@router.get("/export", summary="Экспорт доски в JSON")
async def export_board(
    board_name: str | None = Query(None, alias="boardName"),
    board: BoardSyncContext = Depends(get_board),
) -> dict[str, Any]:
    """
    Пример ответа:
    ```json
    {
        "version": "1.0",
        "boardName": "My Kanban Board",
        "exportedAt": 1760862000000,
        "board": {"columns": [...], "tasks": [...]}
    }
    ```
    """
    return board.export_board(board_name or settings.DEFAULT_BOARD_NAME)


@router.post("/import/preview", response_model=ImportPreviewResponse, summary="Проверить файл импорта")
async def preview_import(request: Request) -> ImportPreviewResponse:
    """Тело запроса - содержимое файла экспорта как есть. Невалидный файл - это 200 с valid=false."""
    preview = parse_board_document(await request.body())
    return ImportPreviewResponse.from_preview(preview)


@router.post(
    "/import",
    response_model=BatchResponse,
    summary="Импортировать доску",
    description="Удаляет все задачи и колонки и создаёт их заново из файла. Необратимо.",
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def import_board(request: Request, board: BoardSyncContext = Depends(get_board)) -> BatchResponse:
    preview = parse_board_document(await request.body())
    if not preview.valid or preview.board is None:
        raise BadRequestError("Import file is invalid", details=preview.errors)

    batch = ensure_applied(await board.import_board(preview.board))
    return BatchResponse.from_batch(batch)

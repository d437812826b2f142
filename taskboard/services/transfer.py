"""
Board export/import document.

Формат файла:
    {
        "version": "1.0",
        "boardName": "My Kanban Board",
        "exportedAt": 1760862000000,
        "board": {"columns": [...], "tasks": [...]}
    }
"""

import json
import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from ..schemas import Board, Column, Task, now_millis

EXPORT_VERSION = "1.0"

# Сколько сообщений об ошибках показывать, остальные сворачиваются в "... and N more errors"
MAX_REPORTED_ERRORS = 10


@dataclass
class ImportPreview:
    """Result of validating an import document, shown before the import is applied."""

    valid: bool
    columns_count: int = 0
    tasks_count: int = 0
    errors: list[str] = field(default_factory=list)
    board_name: str | None = None
    exported_at: int | None = None
    version: str | None = None
    board: Board | None = None


def build_export_document(
    columns: Sequence[Column],
    tasks: Sequence[Task],
    board_name: str,
    exported_at: int | None = None,
) -> dict[str, Any]:
    """Build the JSON-ready export document for the given board state."""
    board = Board(columns=list(columns), tasks=list(tasks))
    return {
        "version": EXPORT_VERSION,
        "boardName": board_name,
        "exportedAt": exported_at if exported_at is not None else now_millis(),
        "board": board.to_document(),
    }


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _is_number(value: Any) -> bool:
    # json.loads пропускает Infinity и NaN
    return isinstance(value, int | float) and not isinstance(value, bool) and math.isfinite(value)


def _column_errors(columns: list[Any]) -> list[str]:
    errors = []
    for idx, column in enumerate(columns, start=1):
        if not isinstance(column, dict):
            errors.append(f"Column {idx}: not an object")
            continue
        for name in ("id", "name", "color"):
            if not _is_text(column.get(name)):
                errors.append(f"Column {idx}: missing or invalid {name}")
        if not _is_number(column.get("order")):
            errors.append(f"Column {idx}: missing or invalid order")
    return errors


def _task_errors(tasks: list[Any], column_ids: set[str]) -> list[str]:
    errors = []
    for idx, task in enumerate(tasks, start=1):
        if not isinstance(task, dict):
            errors.append(f"Task {idx}: not an object")
            continue
        for name in ("id", "title"):
            if not _is_text(task.get(name)):
                errors.append(f"Task {idx}: missing or invalid {name}")

        column_id = task.get("columnId")
        if not _is_text(column_id):
            errors.append(f"Task {idx}: missing or invalid columnId")
        elif column_id not in column_ids:
            errors.append(f"Task {idx}: references non-existent column {column_id}")

        if not _is_number(task.get("createdAt")):
            errors.append(f"Task {idx}: missing or invalid createdAt")
        if not isinstance(task.get("tags"), list):
            errors.append(f"Task {idx}: missing or invalid tags array")
    return errors


def _truncate(errors: list[str]) -> list[str]:
    if len(errors) <= MAX_REPORTED_ERRORS:
        return errors
    hidden = len(errors) - MAX_REPORTED_ERRORS
    return [*errors[:MAX_REPORTED_ERRORS], f"... and {hidden} more errors"]


def validate_board_document(data: Any) -> ImportPreview:
    """
    Validate a parsed import document.

    Проверяется:
    1. Есть объект board
    2. board.columns - массив; у каждой колонки строки id/name/color и число order
    3. board.tasks - массив; у каждой задачи строки id/title, columnId
       ссылается на существующую колонку, число createdAt, массив tags
    4. Остальные поля (priority, points, comments) - схемой Board

    Номера в сообщениях начинаются с 1: "Task 3: references non-existent column col-x".
    """
    if not isinstance(data, dict):
        return ImportPreview(valid=False, errors=["Invalid JSON format"])

    errors: list[str] = []

    board = data.get("board")
    if not isinstance(board, dict):
        errors.append('Missing "board" property')
        board = {}

    columns = board.get("columns")
    if isinstance(columns, list):
        errors.extend(_column_errors(columns))
    else:
        errors.append('Missing or invalid "columns" array')
        columns = []

    tasks = board.get("tasks")
    if isinstance(tasks, list):
        column_ids = {column.get("id") for column in columns if isinstance(column, dict)}
        errors.extend(_task_errors(tasks, column_ids))
    else:
        errors.append('Missing or invalid "tasks" array')
        tasks = []

    parsed_board = None
    if not errors:
        try:
            parsed_board = Board.model_validate(board)
        except ValidationError as e:
            for error in e.errors():
                location = ".".join(str(part) for part in error.get("loc", ()))
                errors.append(f"{location}: {error.get('msg', 'invalid value')}")

    exported_at = data.get("exportedAt")
    return ImportPreview(
        valid=not errors,
        columns_count=len(columns),
        tasks_count=len(tasks),
        errors=_truncate(errors),
        board_name=data.get("boardName") if isinstance(data.get("boardName"), str) else None,
        exported_at=int(exported_at) if _is_number(exported_at) else None,
        version=data.get("version") if isinstance(data.get("version"), str) else None,
        board=parsed_board,
    )


def parse_board_document(text: str | bytes) -> ImportPreview:
    """Parse raw JSON text and validate it; parse errors become a single preview error."""
    try:
        data = json.loads(text)
    except ValueError as e:
        return ImportPreview(valid=False, errors=[f"Failed to parse JSON file: {e}"])
    return validate_board_document(data)

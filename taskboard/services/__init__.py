"""Service layer: ordering algorithms, board sync context, export/import."""

from .batch import BatchStep, run_batch
from .board import BoardSyncContext
from .ordering import (
    move_before,
    move_to_column,
    next_order,
    normalize_task_order,
    reorder,
    tasks_in_column,
)
from .transfer import (
    EXPORT_VERSION,
    ImportPreview,
    build_export_document,
    parse_board_document,
    validate_board_document,
)

__all__ = [
    "BoardSyncContext",
    "BatchStep",
    "run_batch",
    "normalize_task_order",
    "reorder",
    "move_before",
    "move_to_column",
    "next_order",
    "tasks_in_column",
    "EXPORT_VERSION",
    "ImportPreview",
    "build_export_document",
    "validate_board_document",
    "parse_board_document",
]

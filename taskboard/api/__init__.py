"""API layer - FastAPI endpoints over the board sync context."""

from .board import router as board_router
from .columns import router as columns_router
from .tasks import router as tasks_router

__all__ = [
    "tasks_router",
    "columns_router",
    "board_router",
]

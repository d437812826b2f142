"""Pydantic entities of the board domain."""

from .entities import Board, BoardEntity, Column, Comment, Priority, Task, Theme, now_millis

__all__ = [
    "BoardEntity",
    "Board",
    "Column",
    "Comment",
    "Priority",
    "Task",
    "Theme",
    "now_millis",
]

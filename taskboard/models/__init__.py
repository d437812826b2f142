"""SQLAlchemy models for the relational store."""

from .base import Base, OwnedMixin, utc_now
from .column import ColumnRow
from .task import TaskRow
from .user_settings import UserSettingsRow

__all__ = [
    "Base",
    "OwnedMixin",
    "utc_now",
    "TaskRow",
    "ColumnRow",
    "UserSettingsRow",
]

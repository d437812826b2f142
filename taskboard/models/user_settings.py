"""Per-owner settings row."""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utc_now


class UserSettingsRow(Base):
    """Настройки владельца доски (пока только тема)."""

    __tablename__ = "user_settings"

    owner_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    theme: Mapped[str] = mapped_column(String(16), nullable=False, default="light")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, onupdate=utc_now, nullable=False
    )

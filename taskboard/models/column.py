"""Column row model."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, OwnedMixin


class ColumnRow(Base, OwnedMixin):
    """Строка таблицы columns."""

    __tablename__ = "columns"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    color: Mapped[str] = mapped_column(String(64), nullable=False)
    order: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<ColumnRow(id={self.id!r}, name={self.name!r}, order={self.order})>"

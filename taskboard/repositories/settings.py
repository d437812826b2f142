"""Settings repository for the relational store."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..core.result import Result
from ..models import UserSettingsRow, utc_now
from ..schemas import Theme
from .base import sql_operation


class RelationalSettingsRepository:
    """Одна строка user_settings на владельца; нет строки - тема по умолчанию (light)."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], owner_id: str):
        self.session_factory = session_factory
        self.owner_id = owner_id

    @sql_operation
    async def get_theme(self) -> Result[Theme]:
        async with self.session_factory() as session:
            row = await session.get(UserSettingsRow, self.owner_id)
        return Result.success(Theme(row.theme) if row is not None else Theme.LIGHT)

    @sql_operation
    async def set_theme(self, theme: Theme) -> Result[Theme]:
        theme = Theme(theme)
        async with self.session_factory() as session:
            await session.merge(
                UserSettingsRow(owner_id=self.owner_id, theme=theme.value, updated_at=utc_now())
            )
            await session.commit()
        return Result.success(theme)

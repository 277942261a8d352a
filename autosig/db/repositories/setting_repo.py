"""Setting repository – per-user key/value CRUD for the user_settings table."""

from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from autosig.models.user_setting import UserSetting


class SettingRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._s = session

    async def get_value(self, user_id: str, key: str) -> str | None:
        """Get a setting value for a user."""
        result = await self._s.execute(
            select(UserSetting.value).where(
                UserSetting.user_id == user_id,
                UserSetting.key == key,
            )
        )
        return result.scalar_one_or_none()

    async def set_value(self, user_id: str, key: str, value: str) -> None:
        """Upsert a setting value."""
        stmt = (
            pg_insert(UserSetting)
            .values(user_id=user_id, key=key, value=value)
            .on_conflict_do_update(
                index_elements=["user_id", "key"],
                set_={"value": value, "updated_at": func.now()},
            )
        )
        await self._s.execute(stmt)
        await self._s.commit()

    async def delete_value(self, user_id: str, key: str) -> None:
        """Remove a setting; missing keys are ignored."""
        await self._s.execute(
            delete(UserSetting).where(
                UserSetting.user_id == user_id,
                UserSetting.key == key,
            )
        )
        await self._s.commit()


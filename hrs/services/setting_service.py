"""Setting service — key-value application settings."""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hrs.core.config import settings
from hrs.models.setting import Setting

logger = logging.getLogger("hrs.settings")

COMPANY_NAME_KEY = "company_name"


class SettingService:
    """Reads and writes rows of the settings table."""

    @staticmethod
    async def get(db: AsyncSession, key: str) -> Optional[str]:
        """Return the value stored under ``key``, or None."""
        result = await db.execute(select(Setting.value).where(Setting.key == key))
        return result.scalar_one_or_none()

    @staticmethod
    async def set(db: AsyncSession, key: str, value: str) -> Setting:
        setting = await db.get(Setting, key)
        if setting is None:
            setting = Setting(key=key, value=value)
            db.add(setting)
        else:
            setting.value = value
        await db.commit()
        return setting

    @staticmethod
    async def get_company_name(db: AsyncSession) -> str:
        """Display name for the login page; storage failures fall back to the default."""
        try:
            return await SettingService.get(db, COMPANY_NAME_KEY) or settings.DEFAULT_COMPANY_NAME
        except SQLAlchemyError as e:
            logger.warning("Error loading company name: %s", e)
            return settings.DEFAULT_COMPANY_NAME


setting_service = SettingService()

"""Seed default application settings."""

from sqlalchemy.ext.asyncio import AsyncSession

from hrs.core.config import settings
from hrs.models.setting import Setting
from hrs.services.setting_service import COMPANY_NAME_KEY


async def seed_settings(db: AsyncSession) -> None:
    """Insert default settings that are not set yet."""
    defaults = [
        (COMPANY_NAME_KEY, settings.DEFAULT_COMPANY_NAME),
    ]
    for key, value in defaults:
        if await db.get(Setting, key) is None:
            db.add(Setting(key=key, value=value))

    await db.commit()
    print(f"✅ Seeded {len(defaults)} settings")

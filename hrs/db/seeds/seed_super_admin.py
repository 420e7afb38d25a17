"""Seed the Super Administrator user from env vars."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hrs.core.config import settings
from hrs.core.security import hash_password
from hrs.models.role import Role
from hrs.models.user import User


async def seed_super_admin(db: AsyncSession) -> None:
    """Create a Super Administrator user if none holds the role yet."""
    role_id = Role.SUPER_ADMINISTRATOR["id"]
    if await db.get(Role, role_id) is None:
        print("⚠️  SUPER_ADMINISTRATOR role not found. Run seed_roles first.")
        return

    existing = (await db.execute(
        select(User).where(User.role_id == role_id).limit(1)
    )).unique().scalar_one_or_none()
    if existing:
        print(f"ℹ️  Super Administrator '{existing.email}' already exists, skipping.")
        return

    admin = User(
        username=settings.SUPER_ADMIN_USERNAME,
        email=settings.SUPER_ADMIN_EMAIL,
        password=hash_password(settings.SUPER_ADMIN_PASSWORD),
        first_name=settings.SUPER_ADMIN_FIRST_NAME,
        last_name=settings.SUPER_ADMIN_LAST_NAME,
        role_id=role_id,
    )
    db.add(admin)
    await db.commit()
    print(f"✅ Created Super Administrator: {settings.SUPER_ADMIN_EMAIL}")

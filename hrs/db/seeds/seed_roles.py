"""Seed the Super Administrator role."""

from sqlalchemy.ext.asyncio import AsyncSession

from hrs.models.role import Role


async def seed_roles(db: AsyncSession) -> None:
    """Insert the Super Administrator role if it doesn't already exist."""
    existing = await db.get(Role, Role.SUPER_ADMINISTRATOR["id"])
    if existing:
        print("ℹ️  SUPER_ADMINISTRATOR role already exists, skipping.")
        return

    db.add(Role.super_administrator())
    await db.commit()
    print("✅ SUPER_ADMINISTRATOR role seeded")

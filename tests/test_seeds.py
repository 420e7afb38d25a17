"""
Tests for the database seeders and the settings service.
"""
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from hrs.core.config import settings
from hrs.core.permissions import Permission
from hrs.core.security import verify_password
from hrs.db.seeds.seed_roles import seed_roles
from hrs.db.seeds.seed_settings import seed_settings
from hrs.db.seeds.seed_super_admin import seed_super_admin
from hrs.models import Role, Setting, User
from hrs.services.setting_service import setting_service


@pytest.mark.asyncio
async def test_seeds_are_idempotent(db_session):
    for _ in range(2):
        await seed_roles(db_session)
        await seed_super_admin(db_session)
        await seed_settings(db_session)

    assert await db_session.scalar(select(func.count(Role.id))) == 1
    assert await db_session.scalar(select(func.count(User.id))) == 1

    role = await db_session.get(Role, 1)
    assert role.name == "Super Administrator"
    assert role.permissions == [Permission.DO_EVERYTHING]

    admin = (await db_session.execute(select(User))).unique().scalar_one()
    assert admin.email == settings.SUPER_ADMIN_EMAIL
    assert admin.role_id == 1
    assert admin.can(Permission.DELETE_USERS)
    assert verify_password(settings.SUPER_ADMIN_PASSWORD, admin.password)

    assert await setting_service.get(db_session, "company_name") == settings.DEFAULT_COMPANY_NAME


@pytest.mark.asyncio
async def test_super_admin_seed_needs_role(db_session):
    await seed_super_admin(db_session)
    assert await db_session.scalar(select(func.count(User.id))) == 0


@pytest.mark.asyncio
async def test_setting_set_and_get(db_session):
    assert await setting_service.get(db_session, "company_name") is None
    await setting_service.set(db_session, "company_name", "Acme")
    await setting_service.set(db_session, "company_name", "Acme People")
    assert await setting_service.get(db_session, "company_name") == "Acme People"
    assert await db_session.scalar(select(func.count()).select_from(Setting)) == 1
    assert await setting_service.get_company_name(db_session) == "Acme People"


@pytest.mark.asyncio
async def test_company_name_falls_back_when_storage_fails():
    db = AsyncMock()
    db.execute.side_effect = OperationalError("SELECT", {}, Exception("server has gone away"))
    assert await setting_service.get_company_name(db) == "HRS"


@pytest.mark.asyncio
async def test_seeded_role_does_not_share_default_permissions(db_session):
    await seed_roles(db_session)
    role = await db_session.get(Role, Role.SUPER_ADMINISTRATOR["id"])
    role.permissions.append(Permission.READ_REPORTS)

    assert Role.SUPER_ADMINISTRATOR["permissions"] == [Permission.DO_EVERYTHING]
    assert Role.super_administrator().permissions == [Permission.DO_EVERYTHING]

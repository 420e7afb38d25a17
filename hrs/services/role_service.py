"""Role service: storage access for roles."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hrs.core.exceptions import (
    InternalError, ResourceConflictError, ResourceNotFoundError, ValidationError,
)
from hrs.core.permissions import unknown_permissions
from hrs.models.role import Role
from hrs.models.user import User

logger = logging.getLogger("hrs.roles")

CONFLICT_MESSAGE = "A role with that name already exists."

SORTABLE_COLUMNS = {
    "id": Role.id,
    "name": Role.name,
    "description": Role.description,
    "created_at": Role.created_at,
    "updated_at": Role.updated_at,
}


def _check_permissions(permissions: Optional[List[str]]) -> None:
    unknown = unknown_permissions(permissions or [])
    if unknown:
        raise ValidationError(f"Unknown permissions: {', '.join(unknown)}")


class RoleService:
    """Handles role lookup, listing and persistence."""

    @staticmethod
    async def get(db: AsyncSession, role_id: int, with_users: bool = False) -> Role:
        """Load a role with its creator (and assigned users if asked).

        Raises:
            ResourceNotFoundError: If the role does not exist.
        """
        options = [selectinload(Role.created_by_user)]
        if with_users:
            options.append(selectinload(Role.users))
        stmt = (
            select(Role)
            .where(Role.id == role_id)
            .options(*options)
            .execution_options(populate_existing=True)
        )
        try:
            role = (await db.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError:
            logger.exception("Failed to load role %s", role_id)
            raise InternalError()
        if role is None:
            raise ResourceNotFoundError("Role not found.")
        return role

    @staticmethod
    async def list_roles(
        db: AsyncSession,
        start: int = 0,
        length: Optional[int] = None,
        search: Optional[str] = None,
        name: Optional[str] = None,
        description: Optional[str] = None,
        order_by: str = "id",
        order_dir: str = "asc",
    ) -> Dict[str, Any]:
        """Data-table style listing: search on name, AND-ed column filters."""
        column = SORTABLE_COLUMNS.get(order_by)
        if column is None:
            raise ValidationError(f"Cannot order roles by '{order_by}'")

        conditions = []
        if search and search.strip():
            conditions.append(Role.name.like(f"%{search.strip()}%"))
        if name:
            conditions.append(Role.name.like(f"%{name}%"))
        if description:
            conditions.append(Role.description.like(f"%{description}%"))

        query = (
            select(Role)
            .where(*conditions)
            .options(selectinload(Role.created_by_user))
            .order_by(column.desc() if order_dir == "desc" else column.asc())
        )
        if length:
            query = query.offset(start).limit(length)

        try:
            total = await db.scalar(select(func.count(Role.id)))
            filtered = await db.scalar(select(func.count(Role.id)).where(*conditions))
            roles = (await db.execute(query)).scalars().all()
        except SQLAlchemyError:
            logger.exception("Failed to list roles")
            raise InternalError()

        return {"roles": roles, "total": total, "filtered": filtered}

    @staticmethod
    async def create(
        db: AsyncSession,
        name: str,
        description: Optional[str],
        permissions: List[str],
        created_by_user_id: Optional[int],
    ) -> Role:
        """Create a new role."""
        _check_permissions(permissions)
        await RoleService._ensure_unique_name(db, name)

        role = Role(
            name=name,
            description=description,
            permissions=list(permissions),
            created_by_user_id=created_by_user_id,
        )
        db.add(role)
        await RoleService._commit(db, "create role")
        logger.info("Role %s created by user %s", role.id, created_by_user_id)
        return await RoleService.get(db, role.id)

    @staticmethod
    async def update(db: AsyncSession, role_id: int, **fields) -> Role:
        """Apply a partial update to a role."""
        role = await RoleService.get(db, role_id)

        if fields.get("permissions") is not None:
            _check_permissions(fields["permissions"])
            fields["permissions"] = list(fields["permissions"])
        if fields.get("name") and fields["name"] != role.name:
            await RoleService._ensure_unique_name(db, fields["name"])

        for key, value in fields.items():
            if value is None and key in ("name", "permissions"):
                continue
            setattr(role, key, value)

        await RoleService._commit(db, "update role")
        logger.info("Role %s updated", role_id)
        return await RoleService.get(db, role_id)

    @staticmethod
    async def delete(db: AsyncSession, role_id: int) -> None:
        """Hard-delete a role that no user is assigned to."""
        role = await RoleService.get(db, role_id)
        assigned = await db.scalar(select(func.count(User.id)).where(User.role_id == role.id))
        if assigned:
            raise ValidationError("Role is assigned to users and cannot be deleted.")
        await db.delete(role)
        await RoleService._commit(db, "delete role")
        logger.info("Role %s deleted", role_id)

    @staticmethod
    async def _ensure_unique_name(db: AsyncSession, name: str) -> None:
        existing = await db.scalar(select(Role.id).where(Role.name == name))
        if existing is not None:
            raise ResourceConflictError(f"Role '{name}' already exists.")

    @staticmethod
    async def _commit(db: AsyncSession, action: str) -> None:
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.warning("Conflict while trying to %s", action)
            raise ResourceConflictError(CONFLICT_MESSAGE)
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Failed to %s", action)
            raise InternalError()


role_service = RoleService()

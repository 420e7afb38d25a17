"""User service: storage access for users."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hrs.core.exceptions import (
    InternalError, ResourceConflictError, ResourceNotFoundError, ValidationError,
)
from hrs.core.permissions import unknown_permissions
from hrs.core.security import hash_password
from hrs.models.role import Role
from hrs.models.user import User

logger = logging.getLogger("hrs.users")

CONFLICT_MESSAGE = "A user with that username or email already exists."


class UserService:
    """Handles user lookup, listing and persistence."""

    @staticmethod
    async def get(db: AsyncSession, user_id: int) -> User:
        """Load a user with their role.

        Raises:
            ResourceNotFoundError: If the user does not exist.
        """
        stmt = (
            select(User)
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )
        try:
            user = (await db.execute(stmt)).unique().scalar_one_or_none()
        except SQLAlchemyError:
            logger.exception("Failed to load user %s", user_id)
            raise InternalError()
        if user is None:
            raise ResourceNotFoundError("User not found.")
        return user

    @staticmethod
    async def find_by_login(db: AsyncSession, identifier: str) -> Optional[User]:
        """Find a user by email or username."""
        stmt = select(User).where(or_(User.email == identifier, User.username == identifier))
        return (await db.execute(stmt)).unique().scalar_one_or_none()

    @staticmethod
    async def list_users(
        db: AsyncSession,
        start: int = 0,
        length: Optional[int] = None,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        """List users, searching on name, username and email."""
        conditions = []
        if search and search.strip():
            pattern = f"%{search.strip()}%"
            conditions.append(or_(
                User.username.like(pattern),
                User.email.like(pattern),
                User.first_name.like(pattern),
                User.last_name.like(pattern),
            ))

        query = select(User).where(*conditions).order_by(User.id.asc())
        if length:
            query = query.offset(start).limit(length)

        try:
            total = await db.scalar(select(func.count(User.id)))
            filtered = await db.scalar(select(func.count(User.id)).where(*conditions))
            users = (await db.execute(query)).unique().scalars().all()
        except SQLAlchemyError:
            logger.exception("Failed to list users")
            raise InternalError()

        return {"users": users, "total": total, "filtered": filtered}

    @staticmethod
    async def create(
        db: AsyncSession,
        username: str,
        email: str,
        first_name: str,
        last_name: str,
        password: str,
        role_id: int,
        permissions: Optional[List[str]] = None,
    ) -> User:
        """Create a new user."""
        UserService._check_permissions(permissions)
        await UserService._ensure_role(db, role_id)
        await UserService._ensure_unique(db, username=username, email=email)

        user = User(
            username=username,
            email=email,
            first_name=first_name,
            last_name=last_name,
            password=hash_password(password),
            role_id=role_id,
            permissions=list(permissions) if permissions else None,
        )
        db.add(user)
        await UserService._commit(db, "create user")
        logger.info("User %s created", user.id)
        return await UserService.get(db, user.id)

    @staticmethod
    async def update(db: AsyncSession, user_id: int, **fields) -> User:
        """Apply a partial update to a user."""
        user = await UserService.get(db, user_id)

        if "permissions" in fields:
            UserService._check_permissions(fields["permissions"])
            fields["permissions"] = list(fields["permissions"]) if fields["permissions"] else None
        if fields.get("role_id") is not None:
            await UserService._ensure_role(db, fields["role_id"])
        await UserService._ensure_unique(
            db,
            username=fields.get("username") if fields.get("username") != user.username else None,
            email=fields.get("email") if fields.get("email") != user.email else None,
        )
        if fields.get("password"):
            fields["password"] = hash_password(fields["password"])

        for key, value in fields.items():
            if value is None and key != "permissions":
                continue
            setattr(user, key, value)

        await UserService._commit(db, "update user")
        logger.info("User %s updated", user_id)
        return await UserService.get(db, user_id)

    @staticmethod
    async def delete(db: AsyncSession, user_id: int, acting_user_id: int) -> None:
        """Hard-delete a user, detaching the roles they created."""
        if user_id == acting_user_id:
            raise ValidationError("You cannot delete your own account.")
        user = await UserService.get(db, user_id)
        created = (await db.execute(
            select(Role).where(Role.created_by_user_id == user.id)
        )).scalars().all()
        for role in created:
            role.created_by_user_id = None
        await db.delete(user)
        await UserService._commit(db, "delete user")
        logger.info("User %s deleted", user_id)

    @staticmethod
    def _check_permissions(permissions: Optional[List[str]]) -> None:
        unknown = unknown_permissions(permissions or [])
        if unknown:
            raise ValidationError(f"Unknown permissions: {', '.join(unknown)}")

    @staticmethod
    async def _ensure_role(db: AsyncSession, role_id: int) -> None:
        if await db.get(Role, role_id) is None:
            raise ResourceNotFoundError(f"Role {role_id} not found.")

    @staticmethod
    async def _ensure_unique(
        db: AsyncSession, username: Optional[str] = None, email: Optional[str] = None
    ) -> None:
        if username and await db.scalar(select(User.id).where(User.username == username)):
            raise ResourceConflictError(f"Username '{username}' is already taken.")
        if email and await db.scalar(select(User.id).where(User.email == email)):
            raise ResourceConflictError(f"User with email {email} already exists.")

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


user_service = UserService()

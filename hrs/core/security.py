"""Password hashing and permission-based authorization helpers."""

import hashlib
import hmac
import secrets
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hrs.core.config import settings
from hrs.core.exceptions import AuthenticationError, AuthorizationError, Redirect
from hrs.core.permissions import HIERARCHY, PermissionHierarchy
from hrs.db.session import get_db
from hrs.models.user import User
from hrs.schemas.schemas import SessionUser


def _derive(password: str, salt: str) -> str:
    return hashlib.pbkdf2_hmac(
        "sha512",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        settings.PASSWORD_ITERATIONS,
        settings.PASSWORD_KEY_LENGTH,
    ).hex()


def hash_password(password: str) -> str:
    """Hash a password into the stored ``salt:hash`` format."""
    salt = secrets.token_hex(16)
    return f"{salt}:{_derive(password, salt)}"


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against its ``salt:hash`` encoding."""
    salt, sep, expected = (hashed_password or "").partition(":")
    if not sep or not salt or not expected:
        return False
    return hmac.compare_digest(
        _derive(plain_password, salt).encode("ascii"),
        expected.encode("utf-8", "surrogatepass"),
    )


def get_session_user(request: Request) -> Optional[SessionUser]:
    """Identity stub attached by the session cookie middleware, if any."""
    return getattr(request.state, "user", None)


async def require_session(request: Request) -> SessionUser:
    """Dashboard guard: anonymous visitors are sent back to the login page."""
    stub = get_session_user(request)
    if stub is None:
        raise Redirect("/")
    return stub


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Re-load the full user and role behind the session stub."""
    stub = get_session_user(request)
    if stub is None:
        raise AuthenticationError("Unauthorized")
    result = await db.execute(select(User).where(User.id == stub.id))
    user = result.unique().scalar_one_or_none()
    if user is None:
        raise AuthenticationError("Unauthorized")
    return user


class RequirePermission:
    """Dependency that checks if the current user holds a permission."""

    def __init__(self, permission: str, hierarchy: PermissionHierarchy = HIERARCHY):
        if permission not in hierarchy:
            raise ValueError(f"Unknown permission '{permission}'")
        self.permission = permission
        self.hierarchy = hierarchy

    async def __call__(self, user: User = Depends(get_current_user)) -> User:
        if not user.can(self.permission, self.hierarchy):
            raise AuthorizationError("Forbidden")
        return user

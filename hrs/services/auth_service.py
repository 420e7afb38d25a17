"""Auth service — credential checks for the login form."""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hrs.core.exceptions import AuthenticationError, InternalError, ValidationError
from hrs.core.security import verify_password
from hrs.models.user import User
from hrs.services.user_service import user_service

logger = logging.getLogger("hrs.auth")


class AuthService:
    """Handles authentication."""

    @staticmethod
    async def authenticate(
        db: AsyncSession,
        email: Optional[str],
        username: Optional[str],
        password: Optional[str],
    ) -> User:
        """Return the user matching the credentials.

        Raises:
            ValidationError: If the identifier or password is missing.
            AuthenticationError: If credentials are invalid.
            InternalError: If the user lookup fails.
        """
        identifier = (email or username or "").strip()
        if not identifier or not password:
            raise ValidationError("Email or username and password are required")

        try:
            user = await user_service.find_by_login(db, identifier)
        except SQLAlchemyError:
            logger.exception("Login lookup failed")
            raise InternalError("An error occurred during login")

        if user is None or not verify_password(password, user.password):
            logger.info("Failed login attempt for %s", identifier)
            raise AuthenticationError("Invalid credentials")

        logger.info("User %s logged in", user.id)
        return user


auth_service = AuthService()

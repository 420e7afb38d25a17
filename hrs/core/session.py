"""Session cookies: issuing, clearing and resolving them into an identity stub."""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Mapping, Optional

from fastapi import Response
from jose import JWTError, jwt

from hrs.core.config import settings
from hrs.schemas.schemas import SessionUser

logger = logging.getLogger("hrs.session")

SESSION_ID_COOKIE = "sessionId"
USER_ID_COOKIE = "userId"
USER_EMAIL_COOKIE = "userEmail"
USER_FIRST_NAME_COOKIE = "userFirstName"
USER_LAST_NAME_COOKIE = "userLastName"

SESSION_COOKIES = (
    SESSION_ID_COOKIE,
    USER_ID_COOKIE,
    USER_EMAIL_COOKIE,
    USER_FIRST_NAME_COOKIE,
    USER_LAST_NAME_COOKIE,
)


def create_session_token(user_id: int, max_age: Optional[timedelta] = None) -> str:
    """Create a signed, opaque session token bound to a user id."""
    expire = datetime.now(timezone.utc) + (
        max_age or timedelta(days=settings.SESSION_MAX_AGE_DAYS)
    )
    claims = {
        "sub": str(user_id),
        "jti": secrets.token_hex(16),
        "exp": expire,
    }
    return jwt.encode(claims, settings.SESSION_SECRET, algorithm=settings.SESSION_ALGORITHM)


def decode_session_token(token: str) -> Optional[int]:
    """Return the user id a session token was issued for, or None if invalid."""
    try:
        payload = jwt.decode(
            token, settings.SESSION_SECRET, algorithms=[settings.SESSION_ALGORITHM]
        )
    except JWTError:
        return None
    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        return None


def resolve_session_user(cookies: Mapping[str, str]) -> Optional[SessionUser]:
    """Map request cookies to an identity stub; None means anonymous.

    The stub only identifies the caller. Display fields come straight from
    cookies and are never used for authorization.
    """
    session_id = cookies.get(SESSION_ID_COOKIE)
    raw_user_id = cookies.get(USER_ID_COOKIE)
    if not session_id or not raw_user_id:
        return None

    try:
        user_id = int(raw_user_id)
    except ValueError:
        logger.debug("Ignoring malformed userId cookie %r", raw_user_id)
        return None

    if decode_session_token(session_id) != user_id:
        logger.debug("Ignoring session cookie not issued for user %s", user_id)
        return None

    return SessionUser(
        id=user_id,
        email=cookies.get(USER_EMAIL_COOKIE),
        first_name=cookies.get(USER_FIRST_NAME_COOKIE),
        last_name=cookies.get(USER_LAST_NAME_COOKIE),
    )


def set_session_cookies(response: Response, user, token: Optional[str] = None) -> str:
    """Attach all identity cookies for ``user`` to the response."""
    token = token or create_session_token(user.id)
    max_age = int(timedelta(days=settings.SESSION_MAX_AGE_DAYS).total_seconds())
    values = {
        SESSION_ID_COOKIE: token,
        USER_ID_COOKIE: str(user.id),
        USER_EMAIL_COOKIE: user.email,
        USER_FIRST_NAME_COOKIE: user.first_name,
        USER_LAST_NAME_COOKIE: user.last_name,
    }
    for name, value in values.items():
        response.set_cookie(
            name,
            value,
            max_age=max_age,
            path="/",
            httponly=name in (SESSION_ID_COOKIE, USER_ID_COOKIE),
            secure=settings.SESSION_COOKIE_SECURE,
            samesite="lax",
        )
    return token


def clear_session_cookies(response: Response) -> None:
    for name in SESSION_COOKIES:
        response.delete_cookie(name, path="/")

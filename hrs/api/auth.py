"""Auth router — login page data, login and logout."""

from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from hrs.core.config import settings
from hrs.core.rate_limiter import limiter
from hrs.core.session import clear_session_cookies, set_session_cookies
from hrs.db.session import get_db
from hrs.services.auth_service import auth_service
from hrs.services.setting_service import setting_service

router = APIRouter(tags=["auth"])


@router.get("/")
async def home(db: AsyncSession = Depends(get_db)):
    """Login page data."""
    return {"company_name": await setting_service.get_company_name(db)}


@router.post("/login")
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    email: Optional[str] = Form(None),
    username: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    db: AsyncSession = Depends(get_db),
):
    """Verify credentials, issue session cookies and go to the dashboard."""
    user = await auth_service.authenticate(db, email, username, password)
    response = RedirectResponse(url="/dashboard", status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookies(response, user)
    return response


@router.post("/logout")
async def logout():
    """Clear all session cookies."""
    response = RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)
    clear_session_cookies(response)
    return response

"""Pytest configuration for all tests."""

from typing import AsyncGenerator, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from hrs.core.permissions import Permission
from hrs.core.rate_limiter import limiter
from hrs.core.security import hash_password
from hrs.core.session import SESSION_ID_COOKIE, USER_ID_COOKIE, create_session_token
from hrs.db.base import Base
from hrs.db.session import get_db
from hrs.main import app
from hrs.models import Role, User

DEFAULT_PASSWORD = "P@s5w0rd"


@pytest.fixture(autouse=True)
def disable_rate_limit():
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app, with get_db bound to the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_role(db_session):
    async def _make_role(name: str, permissions: List[str], **kwargs) -> Role:
        role = Role(name=name, permissions=permissions, **kwargs)
        db_session.add(role)
        await db_session.commit()
        return role

    return _make_role


@pytest.fixture
def make_user(db_session):
    async def _make_user(
        username: str,
        role: Role,
        permissions: Optional[List[str]] = None,
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        user = User(
            username=username,
            email=f"{username}@example.com",
            first_name=username.capitalize(),
            last_name="Tester",
            password=hash_password(password),
            role_id=role.id,
            permissions=permissions,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make_user


@pytest_asyncio.fixture
async def super_admin_role(db_session) -> Role:
    role = Role.super_administrator()
    db_session.add(role)
    await db_session.commit()
    return role


@pytest_asyncio.fixture
async def super_admin(make_user, super_admin_role) -> User:
    return await make_user("ynnorj", super_admin_role)


@pytest_asyncio.fixture
async def reader_role(make_role, super_admin_role) -> Role:
    # Created after the Super Administrator so id 1 is never taken by autoincrement.
    return await make_role("Reader", [Permission.READ_ROLES, Permission.READ_USERS])


@pytest_asyncio.fixture
async def reader(make_user, reader_role) -> User:
    return await make_user("reader", reader_role)


def login_as(client: AsyncClient, user: User) -> None:
    """Give the client a valid session for ``user``."""
    client.cookies.set(SESSION_ID_COOKIE, create_session_token(user.id))
    client.cookies.set(USER_ID_COOKIE, str(user.id))


@pytest.fixture
def login():
    return login_as

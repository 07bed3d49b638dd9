"""
Shared test fixtures for the SWMS test suite.

Every test gets its own in-memory aiosqlite database; the app's DB
dependency is overridden to point at it.
"""

import os
import sys
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-0123456789abcdef0123456789abcdef"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["CORS_ORIGINS"] = '["http://localhost:3000"]'

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from swms.api.deps import get_db
from swms.core.enums import Role
from swms.core.security import TokenCodec, get_password_hash
from swms.db.base import Base
from swms.main import app
from swms.models.user import User


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 11, 1, 8, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def test_engine():
    """Fresh in-memory database with all tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def codec() -> TokenCodec:
    return app.state.token_codec


@pytest.fixture
def create_user(session_factory):
    """Factory inserting a user directly, bypassing the API."""

    async def _create(
        email: str,
        role: Role = Role.EMPLOYEE,
        password: str = "password123",
        name: str | None = None,
        department: str | None = None,
    ) -> User:
        async with session_factory() as session:
            user = User(
                email=email,
                name=name or email.split("@")[0].title(),
                hashed_password=get_password_hash(password),
                role=role,
                department=department,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return _create


@pytest.fixture
def auth_headers(codec):
    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {codec.issue(user.email, user.role)}"}

    return _headers


@pytest.fixture
async def admin(create_user) -> User:
    return await create_user("admin@test.com", Role.ADMIN, name="Ada Admin")


@pytest.fixture
async def manager(create_user) -> User:
    return await create_user("manager@test.com", Role.MANAGER, name="Max Manager")


@pytest.fixture
async def employee(create_user) -> User:
    return await create_user("employee@test.com", Role.EMPLOYEE, name="Eve Employee")


@pytest.fixture
async def other_employee(create_user) -> User:
    return await create_user("other@test.com", Role.EMPLOYEE, name="Otto Other")

import os
from typing import AsyncGenerator, Callable, Awaitable

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from leaveease.auth.models import User
from leaveease.auth.security import create_access_token, hash_password
from leaveease.core.enums import Role
from leaveease.db.init_db import create_tables
from leaveease.db.session import get_db
from leaveease.main import app


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "Test@12345"


@pytest.fixture()
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory schema per test; overrides the FastAPI session dependency."""
    # StaticPool keeps a single connection so every session sees the same in-memory DB
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_tables(engine)
    async_session = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:

        async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
            yield session

        app.dependency_overrides[get_db] = override_get_db
        yield session

    app.dependency_overrides.pop(get_db, None)
    await engine.dispose()


@pytest.fixture()
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    async def _make_user(username: str, role: Role = Role.EMPLOYEE) -> User:
        user = User(
            username=username,
            email=f"{username}@test.com",
            password_hash=hash_password(TEST_PASSWORD),
            role=role.value,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
async def alice(make_user) -> User:
    return await make_user("alice")


@pytest.fixture()
async def bob(make_user) -> User:
    return await make_user("bob")


@pytest.fixture()
async def admin(make_user) -> User:
    return await make_user("admin", Role.ADMIN)


@pytest.fixture()
def auth_headers() -> Callable[[User], dict]:
    """Bearer header for a user, as issued at login."""

    def _headers(user: User) -> dict:
        token = create_access_token(subject={"sub": user.username, "role": user.role})
        return {"Authorization": f"Bearer {token}"}

    return _headers

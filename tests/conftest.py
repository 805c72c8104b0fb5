"""
tests.conftest

Shared fixtures.

Responsibilities:
- Build test settings with a throwaway SQLite file and a cheap bcrypt cost.
- Provide sessions/services for service-level tests.
- Provide an app + httpx client with the lifespan entered for HTTP tests.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncIterator
from datetime import UTC, datetime

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from todo_api.api.app import create_app
from todo_api.auth.hashing import PasswordHasher
from todo_api.auth.jwt import JwtConfig
from todo_api.auth.models import Principal, Role
from todo_api.db.init_db import init_db
from todo_api.db.models import Account
from todo_api.db.session import create_engine, create_sessionmaker
from todo_api.services.identity_service import IdentityService
from todo_api.services.task_service import TaskService
from todo_api.settings import Settings

T0 = datetime(2030, 1, 1, 12, 0, 0, tzinfo=UTC)
TEST_SECRET = "test-signing-secret-0123456789abcdef0123456789"


def admin_principal() -> Principal:
    return Principal(identity=uuid.uuid4(), role=Role.admin)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'todo.db'}",
        jwt_secret=TEST_SECRET,
        password_hash_rounds=4,
        log_level="WARNING",
    )


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def jwt_cfg(settings: Settings) -> JwtConfig:
    return JwtConfig.from_settings(settings)


@pytest_asyncio.fixture
async def sessionmaker(settings: Settings) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        yield create_sessionmaker(engine)
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def session(
    sessionmaker: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    async with sessionmaker() as s:
        yield s


@pytest.fixture
def identity(session: AsyncSession, hasher: PasswordHasher, jwt_cfg: JwtConfig) -> IdentityService:
    return IdentityService(session=session, hasher=hasher, jwt_cfg=jwt_cfg)


@pytest.fixture
def tasks(session: AsyncSession) -> TaskService:
    return TaskService(session=session)


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    application = create_app(settings=settings)
    # httpx ASGITransport does not run lifespan events; enter it explicitly.
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def seed_account(app: FastAPI, *, email: str, password: str, role: Role) -> Account:
    """Create an account directly through the service, bypassing the HTTP role rules."""

    async with app.state.sessionmaker() as s:
        svc = IdentityService(session=s, hasher=app.state.hasher, jwt_cfg=app.state.jwt_cfg)
        return await svc.register(admin_principal(), email=email, secret=password, role=role)


async def login(client: httpx.AsyncClient, email: str, password: str) -> dict[str, str]:
    r = await client.post("/v1/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


class ExplodingSession:
    """Stands in for a session in tests that must finish before any storage access."""

    def __getattr__(self, name: str):
        raise AssertionError(f"storage accessed: session.{name}")

"""
todo_api.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide request-scoped DB sessions.
- Build services from the shared, read-only components created at startup.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from todo_api.services.identity_service import IdentityService
from todo_api.services.task_service import TaskService


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created in the lifespan of `todo_api.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by the service layer.
    async with session_factory() as session:
        yield session


def identity_service(
    request: Request,
    session: AsyncSession = Depends(db_session),
) -> IdentityService:
    state = request.app.state
    return IdentityService(session=session, hasher=state.hasher, jwt_cfg=state.jwt_cfg)


def task_service(session: AsyncSession = Depends(db_session)) -> TaskService:
    return TaskService(session=session)

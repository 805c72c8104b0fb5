"""
todo_api.db.session

Async SQLAlchemy engine + session factory helpers.

Responsibilities:
- Create the async engine from settings.
- Turn on SQLite foreign-key enforcement so ownership integrity and cascades hold.
- Create the async sessionmaker with safe defaults.
- Provide the commit-or-rollback scope services use around each mutation.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from todo_api.db.errors import storage_errors
from todo_api.settings import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    engine = create_async_engine(
        settings.database_url,
        pool_pre_ping=True,
    )
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _: Any) -> None:
    # SQLite ships with FK enforcement off per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False avoids surprising lazy loads after commits.
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
    )


@asynccontextmanager
async def transaction(session: AsyncSession, entity: str) -> AsyncIterator[AsyncSession]:
    """
    Commit the work done inside the block, or roll it back on any failure.
    Each service mutation runs in one of these, so a failed or cancelled request
    never leaves partial writes behind.
    """

    try:
        yield session
        with storage_errors(entity):
            await session.commit()
    except BaseException:
        # Includes CancelledError from an abandoned request.
        await session.rollback()
        raise


# --- Module Notes -----------------------------------------------------------
# The API layer scopes one session per request (`api.deps.db_session`); closing it
# discards anything left uncommitted.

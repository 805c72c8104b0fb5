"""
todo_api.db.repositories.tasks

Repository for `Task` entities.

Responsibilities:
- Create, fetch and list tasks per owner (optionally narrowed by status).
- Update/delete conditioned on the owner observed during the authorization fetch, so a
  concurrent reassignment turns the write into a no-op instead of a cross-owner write.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from todo_api.db.errors import storage_errors
from todo_api.db.models import Task, TaskStatus, utcnow


class TaskRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        owner_id: uuid.UUID,
        description: str,
        now: datetime | None = None,
    ) -> Task:
        created_at = now or utcnow()
        task = Task(
            id=uuid.uuid4(),
            owner_id=owner_id,
            description=description,
            status=TaskStatus.todo,
            created_at=created_at,
            updated_at=created_at,
        )
        # A missing owner surfaces here as an FK violation (Conflict), not as NotFound.
        with storage_errors("task"):
            self._session.add(task)
            await self._session.flush()
        return task

    async def get(self, task_id: uuid.UUID) -> Task | None:
        with storage_errors("task"):
            return await self._session.get(Task, task_id)

    async def list_for_owner(
        self, owner_id: uuid.UUID, *, status: TaskStatus | None = None
    ) -> list[Task]:
        stmt = select(Task).where(Task.owner_id == owner_id)
        if status is not None:
            stmt = stmt.where(Task.status == status)
        stmt = stmt.order_by(Task.created_at, Task.id)
        with storage_errors("task"):
            return list((await self._session.execute(stmt)).scalars().all())

    async def update(
        self,
        task_id: uuid.UUID,
        *,
        owner_id: uuid.UUID,
        description: str | None = None,
        status: TaskStatus | None = None,
        now: datetime | None = None,
    ) -> Task | None:
        values: dict[str, Any] = {"updated_at": now or utcnow()}
        if description is not None:
            values["description"] = description
        if status is not None:
            values["status"] = status

        stmt = (
            update(Task)
            .where(Task.id == task_id, Task.owner_id == owner_id)
            .values(**values)
        )
        with storage_errors("task"):
            result = await self._session.execute(stmt)
            if result.rowcount == 0:
                return None
            return await self._session.get(Task, task_id, populate_existing=True)

    async def delete(self, task_id: uuid.UUID, *, owner_id: uuid.UUID) -> bool:
        stmt = delete(Task).where(Task.id == task_id, Task.owner_id == owner_id)
        with storage_errors("task"):
            result = await self._session.execute(stmt)
        return result.rowcount > 0


# --- Module Notes -----------------------------------------------------------
# Callers commit; these methods only flush/execute inside the request's transaction.

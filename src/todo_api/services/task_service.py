"""
todo_api.services.task_service

Owned-task service.

Responsibilities:
- Create/read/list/update/delete tasks, each authorized against the task's owner.
- Treat a task addressed through another owner's collection as absent.
- Condition writes on the owner seen during the authorization fetch.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from todo_api.auth.models import Principal
from todo_api.auth.policy import Operation, authorize
from todo_api.db.models import Task, TaskStatus, utcnow
from todo_api.db.repositories.tasks import TaskRepo
from todo_api.db.session import transaction
from todo_api.errors import NoFieldsToUpdate, NotFound, ValidationFailure
from todo_api.observability.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class TaskChanges:
    """Partial task update: a field changes iff it is not None."""

    description: str | None = None
    status: TaskStatus | None = None

    @property
    def is_empty(self) -> bool:
        return self.description is None and self.status is None


class TaskService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._tasks = TaskRepo(session)

    async def create(
        self,
        principal: Principal | None,
        *,
        owner_id: uuid.UUID,
        description: str,
        now: datetime | None = None,
    ) -> Task:
        # The task does not exist yet, so the requested owner is the only owner to check.
        authorize(principal, owner_id, Operation.create_task)
        if not description.strip():
            raise ValidationFailure("description must not be empty")

        async with transaction(self._session, "task"):
            task = await self._tasks.create(owner_id=owner_id, description=description, now=now)

        log.info("task_created", task_id=str(task.id), owner_id=str(owner_id))
        return task

    async def get(
        self,
        principal: Principal | None,
        task_id: uuid.UUID,
        *,
        owner_id: uuid.UUID | None = None,
    ) -> Task:
        self._precheck(principal, owner_id, Operation.read_task)
        return await self._fetch_authorized(principal, task_id, owner_id, Operation.read_task)

    async def list_for_owner(
        self,
        principal: Principal | None,
        owner_id: uuid.UUID,
        *,
        status: TaskStatus | None = None,
    ) -> list[Task]:
        authorize(principal, owner_id, Operation.list_tasks)
        return await self._tasks.list_for_owner(owner_id, status=status)

    async def update(
        self,
        principal: Principal | None,
        task_id: uuid.UUID,
        changes: TaskChanges,
        *,
        owner_id: uuid.UUID | None = None,
        now: datetime | None = None,
    ) -> Task:
        self._precheck(principal, owner_id, Operation.update_task)
        if changes.is_empty:
            raise NoFieldsToUpdate()
        if changes.description is not None and not changes.description.strip():
            raise ValidationFailure("description must not be empty")

        task = await self._fetch_authorized(principal, task_id, owner_id, Operation.update_task)
        async with transaction(self._session, "task"):
            updated = await self._tasks.update(
                task_id,
                owner_id=task.owner_id,
                description=changes.description,
                status=changes.status,
                now=now or utcnow(),
            )
            if updated is None:
                raise NotFound("task not found")

        log.info("task_updated", task_id=str(task_id), owner_id=str(task.owner_id))
        return updated

    async def delete(
        self,
        principal: Principal | None,
        task_id: uuid.UUID,
        *,
        owner_id: uuid.UUID | None = None,
    ) -> None:
        self._precheck(principal, owner_id, Operation.delete_task)
        task = await self._fetch_authorized(principal, task_id, owner_id, Operation.delete_task)
        async with transaction(self._session, "task"):
            if not await self._tasks.delete(task_id, owner_id=task.owner_id):
                raise NotFound("task not found")

        log.info("task_deleted", task_id=str(task_id), owner_id=str(task.owner_id))

    @staticmethod
    def _precheck(
        principal: Principal | None, owner_id: uuid.UUID | None, operation: Operation
    ) -> None:
        # Without storage access: reject anonymous callers and collections the caller
        # may not address, so existence is never revealed to them.
        if owner_id is not None or principal is None:
            authorize(principal, owner_id, operation)

    async def _fetch_authorized(
        self,
        principal: Principal | None,
        task_id: uuid.UUID,
        owner_id: uuid.UUID | None,
        operation: Operation,
    ) -> Task:
        task = await self._tasks.get(task_id)
        if task is None or (owner_id is not None and task.owner_id != owner_id):
            raise NotFound("task not found")
        # The stored owner is authoritative.
        authorize(principal, task.owner_id, operation)
        return task


# --- Module Notes -----------------------------------------------------------
# Fetch, decide and write run strictly in sequence within one request; the conditional
# write closes the window between the ownership check and the mutation.

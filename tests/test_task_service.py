"""
tests.test_task_service

Owned-task operations: ownership checks, scope mismatches, partial updates and
owner-conditioned writes.
"""

from __future__ import annotations

import uuid
from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from conftest import T0, ExplodingSession, admin_principal
from todo_api.auth.models import Principal, Role
from todo_api.db.models import TaskStatus
from todo_api.db.repositories.tasks import TaskRepo
from todo_api.errors import (
    Conflict,
    Forbidden,
    NoFieldsToUpdate,
    NotFound,
    Unauthorized,
)
from todo_api.services.identity_service import IdentityService
from todo_api.services.task_service import TaskChanges, TaskService


async def _regular(identity: IdentityService, email: str) -> Principal:
    account = await identity.register(None, email=email, secret="pw-123456")
    return Principal(identity=account.id, role=account.role)


@pytest.mark.asyncio
async def test_create_defaults(identity: IdentityService, tasks: TaskService) -> None:
    u1 = await _regular(identity, "u1@example.com")

    task = await tasks.create(u1, owner_id=u1.identity, description="buy groceries", now=T0)

    assert task.owner_id == u1.identity
    assert task.status is TaskStatus.todo
    assert task.created_at == task.updated_at


@pytest.mark.asyncio
async def test_create_for_someone_else_is_forbidden(
    identity: IdentityService, tasks: TaskService
) -> None:
    u1 = await _regular(identity, "u1@example.com")
    u2 = await _regular(identity, "u2@example.com")

    with pytest.raises(Forbidden):
        await tasks.create(u2, owner_id=u1.identity, description="sneaky task")
    assert await tasks.list_for_owner(u1, u1.identity) == []


@pytest.mark.asyncio
async def test_anonymous_create_is_unauthorized(tasks: TaskService) -> None:
    with pytest.raises(Unauthorized):
        await tasks.create(None, owner_id=uuid.uuid4(), description="orphan task")


@pytest.mark.asyncio
async def test_admin_create_for_missing_owner_is_conflict(tasks: TaskService) -> None:
    with pytest.raises(Conflict):
        await tasks.create(admin_principal(), owner_id=uuid.uuid4(), description="nobody's task")


@pytest.mark.asyncio
async def test_read_owner_admin_and_stranger(identity: IdentityService, tasks: TaskService) -> None:
    u1 = await _regular(identity, "u1@example.com")
    u2 = await _regular(identity, "u2@example.com")
    task = await tasks.create(u1, owner_id=u1.identity, description="write report")

    assert (await tasks.get(u1, task.id)).id == task.id
    assert (await tasks.get(admin_principal(), task.id)).id == task.id
    with pytest.raises(Forbidden):
        await tasks.get(u2, task.id)
    with pytest.raises(Unauthorized):
        await tasks.get(None, task.id)


@pytest.mark.asyncio
async def test_missing_task_is_not_found(identity: IdentityService, tasks: TaskService) -> None:
    u1 = await _regular(identity, "u1@example.com")
    with pytest.raises(NotFound):
        await tasks.get(u1, uuid.uuid4(), owner_id=u1.identity)


@pytest.mark.asyncio
async def test_task_addressed_through_wrong_owner_is_not_found(
    identity: IdentityService, tasks: TaskService
) -> None:
    u1 = await _regular(identity, "u1@example.com")
    u2 = await _regular(identity, "u2@example.com")
    task = await tasks.create(u1, owner_id=u1.identity, description="walk the dog")

    with pytest.raises(NotFound):
        await tasks.get(u2, task.id, owner_id=u2.identity)
    with pytest.raises(NotFound):
        await tasks.get(admin_principal(), task.id, owner_id=u2.identity)
    with pytest.raises(NotFound):
        await tasks.delete(u2, task.id, owner_id=u2.identity)


@pytest.mark.asyncio
async def test_foreign_collection_is_forbidden_whether_or_not_task_exists(
    identity: IdentityService, tasks: TaskService
) -> None:
    u1 = await _regular(identity, "u1@example.com")
    u2 = await _regular(identity, "u2@example.com")
    task = await tasks.create(u1, owner_id=u1.identity, description="plan the trip")

    with pytest.raises(Forbidden):
        await tasks.get(u2, task.id, owner_id=u1.identity)
    with pytest.raises(Forbidden):
        await tasks.get(u2, uuid.uuid4(), owner_id=u1.identity)


@pytest.mark.asyncio
async def test_partial_update_changes_only_present_fields(
    identity: IdentityService, tasks: TaskService
) -> None:
    u1 = await _regular(identity, "u1@example.com")
    task = await tasks.create(u1, owner_id=u1.identity, description="clean the garage", now=T0)
    later = T0 + timedelta(hours=1)

    updated = await tasks.update(
        u1, task.id, TaskChanges(status=TaskStatus.in_progress), owner_id=u1.identity, now=later
    )

    assert updated.status is TaskStatus.in_progress
    assert updated.description == "clean the garage"
    assert updated.updated_at == later
    assert updated.created_at == T0
    assert updated.created_at.tzinfo is not None

    renamed = await tasks.update(u1, task.id, TaskChanges(description="clean the attic"))
    assert renamed.description == "clean the attic"
    assert renamed.status is TaskStatus.in_progress


@pytest.mark.asyncio
async def test_empty_task_update_fails_before_storage() -> None:
    svc = TaskService(session=ExplodingSession())  # type: ignore[arg-type]
    me = Principal(identity=uuid.uuid4(), role=Role.regular)

    with pytest.raises(NoFieldsToUpdate):
        await svc.update(me, uuid.uuid4(), TaskChanges(), owner_id=me.identity)
    with pytest.raises(NoFieldsToUpdate):
        await svc.update(admin_principal(), uuid.uuid4(), TaskChanges())


@pytest.mark.asyncio
async def test_stranger_cannot_update_or_delete(
    identity: IdentityService, tasks: TaskService
) -> None:
    u1 = await _regular(identity, "u1@example.com")
    u2 = await _regular(identity, "u2@example.com")
    task = await tasks.create(u1, owner_id=u1.identity, description="fix the bike")

    with pytest.raises(Forbidden):
        await tasks.update(u2, task.id, TaskChanges(status=TaskStatus.done))
    with pytest.raises(Forbidden):
        await tasks.delete(u2, task.id)

    unchanged = await tasks.get(u1, task.id)
    assert unchanged.status is TaskStatus.todo


@pytest.mark.asyncio
async def test_owner_and_admin_can_delete(identity: IdentityService, tasks: TaskService) -> None:
    u1 = await _regular(identity, "u1@example.com")
    first = await tasks.create(u1, owner_id=u1.identity, description="first thing to do")
    second = await tasks.create(u1, owner_id=u1.identity, description="second thing to do")

    await tasks.delete(u1, first.id, owner_id=u1.identity)
    await tasks.delete(admin_principal(), second.id)

    assert await tasks.list_for_owner(u1, u1.identity) == []
    with pytest.raises(NotFound):
        await tasks.delete(u1, first.id)


@pytest.mark.asyncio
async def test_list_with_status_filter(identity: IdentityService, tasks: TaskService) -> None:
    u1 = await _regular(identity, "u1@example.com")
    u2 = await _regular(identity, "u2@example.com")
    a = await tasks.create(u1, owner_id=u1.identity, description="task number one", now=T0)
    b = await tasks.create(
        u1, owner_id=u1.identity, description="task number two", now=T0 + timedelta(minutes=1)
    )
    await tasks.update(u1, b.id, TaskChanges(status=TaskStatus.done))

    assert [t.id for t in await tasks.list_for_owner(u1, u1.identity)] == [a.id, b.id]
    done = await tasks.list_for_owner(u1, u1.identity, status=TaskStatus.done)
    assert [t.id for t in done] == [b.id]
    assert len(await tasks.list_for_owner(admin_principal(), u1.identity)) == 2
    with pytest.raises(Forbidden):
        await tasks.list_for_owner(u2, u1.identity)


@pytest.mark.asyncio
async def test_writes_are_conditioned_on_owner(
    identity: IdentityService,
    tasks: TaskService,
    sessionmaker: async_sessionmaker[AsyncSession],
) -> None:
    u1 = await _regular(identity, "u1@example.com")
    u2 = await _regular(identity, "u2@example.com")
    task = await tasks.create(u1, owner_id=u1.identity, description="original description")

    async with sessionmaker() as s:
        repo = TaskRepo(s)
        assert await repo.update(task.id, owner_id=u2.identity, description="hijacked!!") is None
        assert await repo.delete(task.id, owner_id=u2.identity) is False
        await s.commit()

    async with sessionmaker() as s:
        stored = await TaskRepo(s).get(task.id)
        assert stored is not None
        assert stored.description == "original description"


@pytest.mark.asyncio
async def test_timestamps_read_back_as_utc(
    identity: IdentityService, sessionmaker: async_sessionmaker[AsyncSession]
) -> None:
    u1 = await _regular(identity, "u1@example.com")
    async with sessionmaker() as s:
        created = await TaskService(session=s).create(
            u1, owner_id=u1.identity, description="water the plants"
        )

    async with sessionmaker() as s:
        fetched = await TaskService(session=s).get(u1, created.id)

    assert fetched.created_at == created.created_at
    assert fetched.created_at.utcoffset() == timedelta(0)
    assert fetched.updated_at.utcoffset() == timedelta(0)

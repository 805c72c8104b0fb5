"""
todo_api.api.routers.tasks

Task endpoints, nested under the owning account.

Responsibilities:
- Create and list tasks in `/v1/users/{user_id}/tasks`.
- Read/update/delete a task addressed through its owner's collection.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from todo_api.api.deps import task_service
from todo_api.api.schemas import TaskCreateRequest, TaskResponse, TaskUpdateRequest
from todo_api.auth.deps import get_principal
from todo_api.auth.models import Principal
from todo_api.db.models import TaskStatus
from todo_api.services.task_service import TaskChanges, TaskService

router = APIRouter(prefix="/v1/users/{user_id}/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    user_id: uuid.UUID,
    status: TaskStatus | None = None,
    principal: Principal | None = Depends(get_principal),
    svc: TaskService = Depends(task_service),
) -> list[TaskResponse]:
    tasks = await svc.list_for_owner(principal, user_id, status=status)
    return [TaskResponse.from_model(t) for t in tasks]


@router.post("", response_model=TaskResponse, status_code=HTTP_201_CREATED)
async def create_task(
    user_id: uuid.UUID,
    body: TaskCreateRequest,
    principal: Principal | None = Depends(get_principal),
    svc: TaskService = Depends(task_service),
) -> TaskResponse:
    task = await svc.create(principal, owner_id=user_id, description=body.description)
    return TaskResponse.from_model(task)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    user_id: uuid.UUID,
    task_id: uuid.UUID,
    principal: Principal | None = Depends(get_principal),
    svc: TaskService = Depends(task_service),
) -> TaskResponse:
    return TaskResponse.from_model(await svc.get(principal, task_id, owner_id=user_id))


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    user_id: uuid.UUID,
    task_id: uuid.UUID,
    body: TaskUpdateRequest,
    principal: Principal | None = Depends(get_principal),
    svc: TaskService = Depends(task_service),
) -> TaskResponse:
    changes = TaskChanges(description=body.description, status=body.status)
    task = await svc.update(principal, task_id, changes, owner_id=user_id)
    return TaskResponse.from_model(task)


@router.delete("/{task_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_task(
    user_id: uuid.UUID,
    task_id: uuid.UUID,
    principal: Principal | None = Depends(get_principal),
    svc: TaskService = Depends(task_service),
) -> Response:
    await svc.delete(principal, task_id, owner_id=user_id)
    return Response(status_code=HTTP_204_NO_CONTENT)


# --- Module Notes -----------------------------------------------------------
# The path owner is passed through as `owner_id`; a task that exists under a different
# owner answers 404 exactly like a missing one.

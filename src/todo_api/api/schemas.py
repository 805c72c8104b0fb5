"""
todo_api.api.schemas

Request/response models shared across routers.

Responsibilities:
- Input-shape validation (email format, secret and description lengths) before any
  service runs.
- Stable response shapes that never include secret hashes.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from todo_api.auth.models import Role
from todo_api.db.models import Account, Task, TaskStatus

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: str = Field(min_length=3, max_length=320, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=8, max_length=128)
    role: Role | None = None


class LoginRequest(BaseModel):
    email: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1, max_length=128)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: uuid.UUID
    expires_at: datetime


class AccountUpdateRequest(BaseModel):
    # Absent or null fields are left unchanged.
    model_config = ConfigDict(extra="forbid")

    email: str | None = Field(default=None, min_length=3, max_length=320, pattern=EMAIL_PATTERN)
    password: str | None = Field(default=None, min_length=8, max_length=128)
    role: Role | None = None


class AccountResponse(BaseModel):
    id: uuid.UUID
    email: str
    role: Role
    created_at: datetime

    @classmethod
    def from_model(cls, account: Account) -> AccountResponse:
        return cls(
            id=account.id,
            email=account.email,
            role=account.role,
            created_at=account.created_at,
        )


class TaskCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    description: str = Field(min_length=10, max_length=200)


class TaskUpdateRequest(BaseModel):
    # Absent or null fields are left unchanged.
    model_config = ConfigDict(extra="forbid")

    description: str | None = Field(default=None, min_length=10, max_length=200)
    status: TaskStatus | None = None


class TaskResponse(BaseModel):
    id: uuid.UUID
    owner_id: uuid.UUID
    description: str
    status: TaskStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, task: Task) -> TaskResponse:
        return cls(
            id=task.id,
            owner_id=task.owner_id,
            description=task.description,
            status=task.status,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )

"""
todo_api.db.models

Persistence schema.

Responsibilities:
- Account: login identity, role and secret hash; unique email.
- Task: owned resource; deleted with its owner (ON DELETE CASCADE).
"""

from __future__ import annotations

import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import Enum, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy import Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from todo_api.auth.models import Role
from todo_api.db.base import Base
from todo_api.db.types import UTCDateTime


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


class TaskStatus(enum.StrEnum):
    # Enum values are stored in DB and exposed over the API; treat as stable contract.
    todo = "todo"
    in_progress = "in-progress"
    done = "done"


class Account(Base):
    __tablename__ = "accounts"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    secret_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    role: Mapped[Role] = mapped_column(
        Enum(Role, values_callable=lambda e: [m.value for m in e]), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow
    )

    tasks: Mapped[list[Task]] = relationship(
        back_populates="owner", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (UniqueConstraint("email"),)

    def __repr__(self) -> str:
        # secret_hash stays out of reprs and therefore out of tracebacks.
        return f"Account(id={self.id!s}, email={self.email!r}, role={self.role.value})"


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[TaskStatus] = mapped_column(
        Enum(TaskStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=TaskStatus.todo,
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow
    )

    owner: Mapped[Account] = relationship(back_populates="tasks")

    __table_args__ = (Index("ix_tasks_owner_status", "owner_id", "status"),)


# --- Module Notes -----------------------------------------------------------
# Both enums persist their `.value` (lower-case), not member names.

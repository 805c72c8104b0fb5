"""
todo_api.db.repositories.accounts

Repository for `Account` entities.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from todo_api.auth.models import Role
from todo_api.db.errors import storage_errors
from todo_api.db.models import Account, utcnow


class AccountRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        email: str,
        secret_hash: str,
        role: Role,
        created_at: datetime | None = None,
    ) -> Account:
        account = Account(
            id=uuid.uuid4(),
            email=email,
            secret_hash=secret_hash,
            role=role,
            created_at=created_at or utcnow(),
        )
        with storage_errors("account"):
            self._session.add(account)
            await self._session.flush()
        return account

    async def get(self, account_id: uuid.UUID) -> Account | None:
        with storage_errors("account"):
            return await self._session.get(Account, account_id)

    async def get_by_email(self, email: str) -> Account | None:
        stmt = select(Account).where(Account.email == email)
        with storage_errors("account"):
            return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_all(self) -> list[Account]:
        stmt = select(Account).order_by(Account.created_at, Account.email)
        with storage_errors("account"):
            return list((await self._session.execute(stmt)).scalars().all())

    async def update(
        self,
        account_id: uuid.UUID,
        *,
        email: str | None = None,
        secret_hash: str | None = None,
        role: Role | None = None,
    ) -> Account | None:
        values: dict[str, Any] = {}
        if email is not None:
            values["email"] = email
        if secret_hash is not None:
            values["secret_hash"] = secret_hash
        if role is not None:
            values["role"] = role
        if not values:
            return await self.get(account_id)

        # Single statement: the row either changes as a whole or not at all.
        stmt = update(Account).where(Account.id == account_id).values(**values)
        with storage_errors("account"):
            result = await self._session.execute(stmt)
            if result.rowcount == 0:
                return None
            return await self._session.get(Account, account_id, populate_existing=True)

    async def delete(self, account_id: uuid.UUID) -> bool:
        # Owned tasks go with the row via ON DELETE CASCADE.
        stmt = delete(Account).where(Account.id == account_id)
        with storage_errors("account"):
            result = await self._session.execute(stmt)
        return result.rowcount > 0

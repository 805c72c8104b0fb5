"""
todo_api.services.identity_service

Account lifecycle service (registration, login, profile changes, deletion).

Responsibilities:
- Gate every operation through the access decision procedure, including the
  role-escalation guard on registration and profile updates.
- Hash secrets off the event loop and never log them.
- Authenticate without revealing whether an email is registered.
- Own the transaction boundary for account mutations.
"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from todo_api.auth.hashing import PasswordHasher
from todo_api.auth.jwt import IssuedToken, JwtConfig, issue_token
from todo_api.auth.models import Principal, Role
from todo_api.auth.policy import Operation, authorize, authorize_role_change
from todo_api.db.models import Account
from todo_api.db.repositories.accounts import AccountRepo
from todo_api.db.session import transaction
from todo_api.errors import InvalidCredentials, NoFieldsToUpdate, NotFound, ValidationFailure
from todo_api.observability.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class AccountChanges:
    """Partial profile update: a field changes iff it is not None."""

    email: str | None = None
    secret: str | None = None
    role: Role | None = None

    @property
    def is_empty(self) -> bool:
        return self.email is None and self.secret is None and self.role is None

    @property
    def field_names(self) -> list[str]:
        return [name for name in ("email", "secret", "role") if getattr(self, name) is not None]


def normalize_email(email: str) -> str:
    normalized = email.strip().lower()
    if not normalized or "@" not in normalized:
        raise ValidationFailure("invalid email")
    return normalized


class IdentityService:
    def __init__(
        self,
        *,
        session: AsyncSession,
        hasher: PasswordHasher,
        jwt_cfg: JwtConfig,
    ) -> None:
        self._session = session
        self._hasher = hasher
        self._jwt_cfg = jwt_cfg
        self._accounts = AccountRepo(session)

    async def register(
        self,
        principal: Principal | None,
        *,
        email: str,
        secret: str,
        role: Role | None = None,
    ) -> Account:
        requested_role = role or Role.regular
        authorize(principal, None, Operation.register)
        authorize_role_change(principal, requested_role, Operation.register)

        email = normalize_email(email)
        if not secret:
            raise ValidationFailure("secret must not be empty")

        secret_hash = await asyncio.to_thread(self._hasher.hash, secret)
        async with transaction(self._session, "account"):
            account = await self._accounts.create(
                email=email, secret_hash=secret_hash, role=requested_role
            )

        log.info(
            "account_registered",
            account_id=str(account.id),
            role=account.role.value,
            by=str(principal.identity) if principal else None,
        )
        return account

    async def authenticate(
        self,
        *,
        email: str,
        secret: str,
        now: datetime | None = None,
    ) -> IssuedToken:
        # Unknown email and wrong secret are indistinguishable to the caller.
        try:
            email = normalize_email(email)
        except ValidationFailure:
            raise InvalidCredentials() from None

        account = await self._accounts.get_by_email(email)
        if account is None:
            await asyncio.to_thread(self._spend_verify, secret)
            log.info("authentication_failed", reason="unknown_email")
            raise InvalidCredentials()

        matches = await asyncio.to_thread(self._hasher.verify, secret, account.secret_hash)
        if not matches:
            log.info("authentication_failed", reason="wrong_secret", account_id=str(account.id))
            raise InvalidCredentials()

        issued = issue_token(cfg=self._jwt_cfg, identity=account.id, role=account.role, now=now)
        log.info(
            "token_issued",
            account_id=str(account.id),
            role=account.role.value,
            expires_at=issued.expires_at.isoformat(),
        )
        return issued

    async def get_account(self, principal: Principal | None, account_id: uuid.UUID) -> Account:
        authorize(principal, account_id, Operation.read_account)
        account = await self._accounts.get(account_id)
        if account is None:
            raise NotFound("account not found")
        return account

    async def list_accounts(self, principal: Principal | None) -> list[Account]:
        # No owner applies to the whole collection, so only admins pass.
        authorize(principal, None, Operation.list_accounts)
        return await self._accounts.list_all()

    async def update_profile(
        self,
        principal: Principal | None,
        account_id: uuid.UUID,
        changes: AccountChanges,
    ) -> Account:
        authorize(principal, account_id, Operation.update_account)
        authorize_role_change(principal, changes.role, Operation.update_account)
        if changes.is_empty:
            raise NoFieldsToUpdate()

        email = normalize_email(changes.email) if changes.email is not None else None
        if changes.secret is not None and not changes.secret:
            raise ValidationFailure("secret must not be empty")

        secret_hash = None
        if changes.secret is not None:
            secret_hash = await asyncio.to_thread(self._hasher.hash, changes.secret)

        async with transaction(self._session, "account"):
            account = await self._accounts.update(
                account_id, email=email, secret_hash=secret_hash, role=changes.role
            )
            if account is None:
                raise NotFound("account not found")

        log.info("account_updated", account_id=str(account_id), fields=changes.field_names)
        return account

    async def delete_account(self, principal: Principal | None, account_id: uuid.UUID) -> None:
        authorize(principal, account_id, Operation.delete_account)
        async with transaction(self._session, "account"):
            if not await self._accounts.delete(account_id):
                raise NotFound("account not found")

        log.info("account_deleted", account_id=str(account_id))

    def _spend_verify(self, secret: str) -> None:
        self._hasher.verify(secret, self._hasher.dummy_hash())


# --- Module Notes -----------------------------------------------------------
# Deleting an account removes its tasks through the storage layer's cascade; this
# service does not enumerate them.

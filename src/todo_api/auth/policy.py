"""
todo_api.auth.policy

Access decision procedure.

Responsibilities:
- Decide allow/deny from (principal, resource owner, operation) with no I/O.
- Guard role grants (registration and profile updates) independently of ownership.
- Turn denials into `Unauthorized` (anonymous) or `Forbidden` (authenticated).
"""

from __future__ import annotations

import enum
import uuid

from todo_api.auth.models import Principal, Role
from todo_api.errors import Forbidden, Unauthorized
from todo_api.observability.logging import get_logger

log = get_logger(__name__)


class Operation(enum.StrEnum):
    register = "account:register"
    authenticate = "account:authenticate"
    list_accounts = "account:list"
    read_account = "account:read"
    update_account = "account:update"
    delete_account = "account:delete"
    create_task = "task:create"
    list_tasks = "task:list"
    read_task = "task:read"
    update_task = "task:update"
    delete_task = "task:delete"


class Decision(enum.StrEnum):
    allow = "ALLOW"
    deny = "DENY"


PUBLIC_OPERATIONS: frozenset[Operation] = frozenset(
    {Operation.register, Operation.authenticate}
)


def decide(
    principal: Principal | None,
    resource_owner: uuid.UUID | None,
    operation: Operation,
) -> Decision:
    """
    Rules, first match wins:
    1. public operations are allowed for everyone (role grants are checked separately);
    2. anonymous callers are denied;
    3. admins are allowed;
    4. regular callers are allowed only on resources they own.
    A missing owner never matches.
    """

    if operation in PUBLIC_OPERATIONS:
        return Decision.allow
    if principal is None:
        return Decision.deny
    if principal.role is Role.admin:
        return Decision.allow
    if principal.role is Role.regular and resource_owner == principal.identity:
        return Decision.allow
    return Decision.deny


def decide_role_change(principal: Principal | None, requested_role: Role | None) -> Decision:
    # Only admins may hand out admin, including to themselves.
    if requested_role is None or requested_role is Role.regular:
        return Decision.allow
    if principal is not None and principal.role is Role.admin:
        return Decision.allow
    return Decision.deny


def authorize(
    principal: Principal | None,
    resource_owner: uuid.UUID | None,
    operation: Operation,
) -> None:
    if decide(principal, resource_owner, operation) is Decision.allow:
        return
    _deny(principal, operation)


def authorize_role_change(
    principal: Principal | None,
    requested_role: Role | None,
    operation: Operation,
) -> None:
    if decide_role_change(principal, requested_role) is Decision.allow:
        return
    _deny(principal, operation, requested_role=requested_role)


def _deny(principal: Principal | None, operation: Operation, **extra: object) -> None:
    log.info(
        "access_denied",
        operation=operation.value,
        principal=str(principal.identity) if principal else None,
        role=principal.role.value if principal else None,
        **{k: str(v) for k, v in extra.items()},
    )
    if principal is None:
        raise Unauthorized("authentication required")
    raise Forbidden()


# --- Module Notes -----------------------------------------------------------
# Every service operation calls `authorize` before touching storage for writes, and
# after loading the stored owner for reads/updates/deletes of existing tasks.

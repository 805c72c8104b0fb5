"""
todo_api.auth.models

Auth domain models.

Responsibilities:
- Define the two account roles.
- Define the authenticated identity type (`Principal`) threaded through service calls.
- Define the typed claim set produced by token verification.
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from datetime import datetime


class Role(enum.StrEnum):
    regular = "regular"
    admin = "admin"


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity, derived fresh from each verified token.
    Anonymous callers are represented by `None`, never by a placeholder principal.
    """

    identity: uuid.UUID
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.admin


@dataclass(frozen=True, slots=True)
class TokenClaims:
    identity: uuid.UUID
    role: Role
    issued_at: datetime
    expires_at: datetime

    def to_principal(self) -> Principal:
        return Principal(identity=self.identity, role=self.role)


# --- Module Notes -----------------------------------------------------------
# Keep these models minimal; they cross the API, service and policy layers.

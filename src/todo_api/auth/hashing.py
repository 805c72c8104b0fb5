"""
todo_api.auth.hashing

One-way hashing of account secrets (bcrypt).

Responsibilities:
- Hash a plaintext secret with a fresh salt at a fixed cost factor.
- Verify a plaintext secret against a stored hash in constant time.
- Provide a dummy hash so unknown-account logins cost the same as real ones.
"""

from __future__ import annotations

import secrets

import bcrypt

from todo_api.errors import HashingFailure

# bcrypt only consumes the first 72 bytes of its input.
_BCRYPT_MAX_BYTES = 72


def _encode(secret: str) -> bytes:
    return secret.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class PasswordHasher:
    def __init__(self, *, rounds: int = 14) -> None:
        self._rounds = rounds
        # Built up front so no login ever pays for it.
        self._dummy = self.hash(secrets.token_urlsafe(32))

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, secret: str) -> str:
        try:
            hashed = bcrypt.hashpw(_encode(secret), bcrypt.gensalt(rounds=self._rounds))
        except (ValueError, TypeError) as e:
            raise HashingFailure("could not hash secret") from e
        return hashed.decode("utf-8")

    def verify(self, secret: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(_encode(secret), hashed.encode("utf-8"))
        except (ValueError, TypeError) as e:
            raise HashingFailure("stored hash is malformed") from e

    def dummy_hash(self) -> str:
        return self._dummy


# --- Module Notes -----------------------------------------------------------
# Hashing is deliberately slow; async callers run it via `asyncio.to_thread`.

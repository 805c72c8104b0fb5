"""
todo_api.auth.jwt

JWT issuing and validation.

Responsibilities:
- Issue signed, self-contained tokens carrying identity, role, issued-at and expiry.
- Verify signature and registered claims first, then expiry against a caller-supplied clock.
- Convert raw claims into a typed `TokenClaims` exactly once.

Note:
- HS256 with one process-wide secret; there is no key id, so the secret cannot be rotated
  without invalidating every outstanding token.
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError, PyJWTError

from todo_api.auth.models import Role, TokenClaims
from todo_api.errors import SigningFailure
from todo_api.settings import Settings


@dataclass(frozen=True, slots=True)
class JwtConfig:
    # Algorithm/issuer/audience are enforced during decoding.
    alg: str
    issuer: str
    audience: str
    secret: str
    ttl: timedelta = timedelta(hours=3)

    @classmethod
    def from_settings(cls, settings: Settings) -> JwtConfig:
        return cls(
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
            ttl=settings.token_ttl,
        )


class VerifyFailureReason(enum.StrEnum):
    bad_signature = "bad_signature"
    expired = "expired"


class VerifyFailure(Exception):
    """Token rejected. Callers treat both reasons the same; the reason is for logs only."""

    def __init__(self, reason: VerifyFailureReason, detail: str = "") -> None:
        self.reason = reason
        self.detail = detail
        super().__init__(f"{reason.value}: {detail}" if detail else reason.value)


@dataclass(frozen=True, slots=True)
class IssuedToken:
    token: str
    identity: uuid.UUID
    role: Role
    issued_at: datetime
    expires_at: datetime


def issue_token(
    *,
    cfg: JwtConfig,
    identity: uuid.UUID,
    role: Role,
    now: datetime | None = None,
) -> IssuedToken:
    # NumericDate claims are whole seconds; truncate first so the claim, the returned
    # expiry and the validity window all agree.
    issued_at = (now or datetime.now(tz=UTC)).replace(microsecond=0)
    expires_at = issued_at + cfg.ttl
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": str(identity),
        "role": role.value,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    try:
        token = jwt.encode(payload, cfg.secret, algorithm=cfg.alg)
    except (PyJWTError, NotImplementedError, TypeError, ValueError) as e:
        raise SigningFailure("could not sign token") from e
    return IssuedToken(
        token=token,
        identity=identity,
        role=role,
        issued_at=issued_at,
        expires_at=expires_at,
    )


def verify_token(*, cfg: JwtConfig, token: str, now: datetime | None = None) -> TokenClaims:
    try:
        # Signature and iss/aud only; expiry is checked below against the supplied clock.
        payload = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={
                "require": ["exp", "iat", "iss", "aud", "sub"],
                "verify_exp": False,
                "verify_iat": False,
                "verify_nbf": False,
            },
        )
    except InvalidTokenError as e:
        raise VerifyFailure(VerifyFailureReason.bad_signature, str(e)) from e

    claims = _parse_claims(payload)
    if claims.expires_at <= (now or datetime.now(tz=UTC)):
        raise VerifyFailure(VerifyFailureReason.expired)
    return claims


def _parse_claims(payload: dict[str, Any]) -> TokenClaims:
    try:
        return TokenClaims(
            identity=uuid.UUID(str(payload["sub"])),
            role=Role(payload.get("role")),
            issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=UTC),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise VerifyFailure(VerifyFailureReason.bad_signature, "malformed claims") from e


# --- Module Notes -----------------------------------------------------------
# Token issuing is used by `services.identity_service.IdentityService.authenticate`;
# verification by `auth.resolver.resolve_principal`.

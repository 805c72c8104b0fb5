"""
todo_api.auth.resolver

Principal resolution from a raw Authorization header value.

Responsibilities:
- Absent header -> anonymous (`None`).
- Malformed header or rejected token -> `Unauthorized` with a generic message.
- Valid bearer token -> `Principal` built from the typed claims.
"""

from __future__ import annotations

from datetime import datetime

from fastapi.security.utils import get_authorization_scheme_param

from todo_api.auth.jwt import JwtConfig, VerifyFailure, verify_token
from todo_api.auth.models import Principal
from todo_api.errors import Unauthorized
from todo_api.observability.logging import get_logger

log = get_logger(__name__)

BEARER_SCHEME = "bearer"


def resolve_principal(
    authorization: str | None,
    *,
    cfg: JwtConfig,
    now: datetime | None = None,
) -> Principal | None:
    if authorization is None:
        return None

    scheme, credentials = get_authorization_scheme_param(authorization.strip())
    credentials = credentials.strip()
    if scheme.lower() != BEARER_SCHEME or not credentials:
        log.info("token_rejected", reason="malformed_header")
        raise Unauthorized("invalid authorization header")

    try:
        claims = verify_token(cfg=cfg, token=credentials, now=now)
    except VerifyFailure as e:
        # Expired vs bad signature is visible in logs only.
        log.info("token_rejected", reason=e.reason.value)
        raise Unauthorized("invalid or expired token") from e

    return claims.to_principal()


# --- Module Notes -----------------------------------------------------------
# Pure per-request computation; the only shared input is the read-only JwtConfig.

"""
todo_api.auth.middleware

HTTP middleware that attaches the resolved principal to each request.

Responsibilities:
- Run `resolve_principal` on the Authorization header of every request.
- Reject unresolvable credentials with 401 before any router runs.
- Store the principal (or `None` for anonymous) on `request.state.principal`.
"""

from __future__ import annotations

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.status import HTTP_401_UNAUTHORIZED
from starlette.types import ASGIApp

from todo_api.auth.jwt import JwtConfig
from todo_api.auth.resolver import resolve_principal
from todo_api.errors import Unauthorized


class PrincipalMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, *, cfg: JwtConfig) -> None:
        super().__init__(app)
        self._cfg = cfg

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            principal = resolve_principal(request.headers.get("authorization"), cfg=self._cfg)
        except Unauthorized as e:
            return JSONResponse(
                status_code=HTTP_401_UNAUTHORIZED,
                content={"detail": e.message},
                headers={"WWW-Authenticate": "Bearer"},
            )

        request.state.principal = principal
        if principal is not None:
            structlog.contextvars.bind_contextvars(
                principal=str(principal.identity), role=principal.role.value
            )
        return await call_next(request)


# --- Module Notes -----------------------------------------------------------
# Anonymous requests pass through; protected operations are rejected later by `auth.policy`.

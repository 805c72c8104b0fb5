"""
todo_api.auth.deps

FastAPI dependency functions for authentication.

Responsibilities:
- Expose the principal resolved by `PrincipalMiddleware` to routers.
"""

from __future__ import annotations

from fastapi import Request

from todo_api.auth.models import Principal


def get_principal(request: Request) -> Principal | None:
    # Fail closed: a request that bypassed the middleware is anonymous.
    return getattr(request.state, "principal", None)


# --- Module Notes -----------------------------------------------------------
# Routers pass the principal explicitly into every service call; services never read
# request state themselves.

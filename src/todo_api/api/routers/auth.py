"""
todo_api.api.routers.auth

Registration and login endpoints.

Responsibilities:
- Register accounts (anonymously as `regular`, or by an admin with any role).
- Exchange email + password for a bearer token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from starlette.status import HTTP_201_CREATED

from todo_api.api.deps import identity_service
from todo_api.api.schemas import AccountResponse, LoginRequest, RegisterRequest, TokenResponse
from todo_api.auth.deps import get_principal
from todo_api.auth.models import Principal
from todo_api.services.identity_service import IdentityService

router = APIRouter(prefix="/v1/auth", tags=["auth"])


@router.post("/register", response_model=AccountResponse, status_code=HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    principal: Principal | None = Depends(get_principal),
    svc: IdentityService = Depends(identity_service),
) -> AccountResponse:
    account = await svc.register(
        principal, email=body.email, secret=body.password, role=body.role
    )
    return AccountResponse.from_model(account)


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    svc: IdentityService = Depends(identity_service),
) -> TokenResponse:
    issued = await svc.authenticate(email=body.email, secret=body.password)
    return TokenResponse(
        access_token=issued.token,
        user_id=issued.identity,
        expires_at=issued.expires_at,
    )

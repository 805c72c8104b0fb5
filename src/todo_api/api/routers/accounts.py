"""
todo_api.api.routers.accounts

Account management endpoints.

Responsibilities:
- List accounts (admin), read/update/delete a single account (owner or admin).
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response
from starlette.status import HTTP_204_NO_CONTENT

from todo_api.api.deps import identity_service
from todo_api.api.schemas import AccountResponse, AccountUpdateRequest
from todo_api.auth.deps import get_principal
from todo_api.auth.models import Principal
from todo_api.services.identity_service import AccountChanges, IdentityService

router = APIRouter(prefix="/v1/users", tags=["users"])


@router.get("", response_model=list[AccountResponse])
async def list_accounts(
    principal: Principal | None = Depends(get_principal),
    svc: IdentityService = Depends(identity_service),
) -> list[AccountResponse]:
    accounts = await svc.list_accounts(principal)
    return [AccountResponse.from_model(a) for a in accounts]


@router.get("/{user_id}", response_model=AccountResponse)
async def get_account(
    user_id: uuid.UUID,
    principal: Principal | None = Depends(get_principal),
    svc: IdentityService = Depends(identity_service),
) -> AccountResponse:
    return AccountResponse.from_model(await svc.get_account(principal, user_id))


@router.patch("/{user_id}", response_model=AccountResponse)
async def update_account(
    user_id: uuid.UUID,
    body: AccountUpdateRequest,
    principal: Principal | None = Depends(get_principal),
    svc: IdentityService = Depends(identity_service),
) -> AccountResponse:
    changes = AccountChanges(email=body.email, secret=body.password, role=body.role)
    account = await svc.update_profile(principal, user_id, changes)
    return AccountResponse.from_model(account)


@router.delete("/{user_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_account(
    user_id: uuid.UUID,
    principal: Principal | None = Depends(get_principal),
    svc: IdentityService = Depends(identity_service),
) -> Response:
    await svc.delete_account(principal, user_id)
    return Response(status_code=HTTP_204_NO_CONTENT)

"""
tests.test_resolver

Principal resolution from the Authorization header.
"""

from __future__ import annotations

import uuid
from datetime import timedelta

import pytest

from conftest import T0
from todo_api.auth.jwt import JwtConfig, issue_token
from todo_api.auth.models import Principal, Role
from todo_api.auth.resolver import resolve_principal
from todo_api.errors import Unauthorized


def _bearer(cfg: JwtConfig, identity: uuid.UUID, role: Role = Role.regular) -> str:
    return "Bearer " + issue_token(cfg=cfg, identity=identity, role=role, now=T0).token


def test_absent_header_is_anonymous(jwt_cfg: JwtConfig) -> None:
    assert resolve_principal(None, cfg=jwt_cfg, now=T0) is None


def test_valid_token_yields_principal(jwt_cfg: JwtConfig) -> None:
    identity = uuid.uuid4()
    principal = resolve_principal(_bearer(jwt_cfg, identity, Role.admin), cfg=jwt_cfg, now=T0)
    assert principal == Principal(identity=identity, role=Role.admin)


def test_scheme_is_case_insensitive(jwt_cfg: JwtConfig) -> None:
    identity = uuid.uuid4()
    header = _bearer(jwt_cfg, identity).replace("Bearer", "bearer", 1)
    principal = resolve_principal(header, cfg=jwt_cfg, now=T0)
    assert principal is not None and principal.identity == identity


@pytest.mark.parametrize("header", ["", "Bearer", "Bearer    ", "Basic dXNlcjpwYXNz", "Token abc"])
def test_malformed_header_is_rejected(jwt_cfg: JwtConfig, header: str) -> None:
    with pytest.raises(Unauthorized):
        resolve_principal(header, cfg=jwt_cfg, now=T0)


def test_expired_and_forged_tokens_look_the_same(jwt_cfg: JwtConfig) -> None:
    expired = _bearer(jwt_cfg, uuid.uuid4())
    with pytest.raises(Unauthorized) as expired_exc:
        resolve_principal(expired, cfg=jwt_cfg, now=T0 + timedelta(hours=4))

    with pytest.raises(Unauthorized) as forged_exc:
        resolve_principal("Bearer a.b.c", cfg=jwt_cfg, now=T0)

    assert expired_exc.value.message == forged_exc.value.message


def test_extra_whitespace_around_token_is_tolerated(jwt_cfg: JwtConfig) -> None:
    identity = uuid.uuid4()
    header = _bearer(jwt_cfg, identity).replace("Bearer ", "Bearer   ", 1) + "  "
    principal = resolve_principal(header, cfg=jwt_cfg, now=T0)
    assert principal is not None and principal.identity == identity

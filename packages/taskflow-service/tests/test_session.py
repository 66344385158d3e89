"""Bearer header parsing and identity resolution."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta

import pytest
from _helpers import bearer, make_settings

from taskflow_service.auth.session import authenticate, parse_bearer
from taskflow_service.auth.tokens import TokenService
from taskflow_service.errors import Unauthenticated


def test_parse_bearer_extracts_token():
    assert parse_bearer("Bearer abc.def.ghi") == "abc.def.ghi"


@pytest.mark.parametrize(
    "header",
    [
        None,
        "",
        "Bearer",
        "Bearer ",
        "bearer abc",
        "Basic dXNlcjpwYXNz",
        "Bearer abc def",
        "Bearer  abc",
        "Token abc",
    ],
)
def test_parse_bearer_rejects_anything_but_exact_scheme(header):
    with pytest.raises(Unauthenticated):
        parse_bearer(header)


def test_authenticate_returns_identity(tokens):
    user_id = uuid.uuid4()
    identity = authenticate(f"Bearer {tokens.issue_access(user_id)}", tokens)
    assert identity.user_id == user_id


def test_authenticate_rejects_refresh_token(tokens):
    with pytest.raises(Unauthenticated):
        authenticate(f"Bearer {tokens.issue_refresh(uuid.uuid4())}", tokens)


def test_rejections_share_one_message(tokens):
    """Callers cannot tell why a credential failed."""
    expired = TokenService(
        make_settings(), clock=lambda: datetime.now(UTC) - timedelta(hours=1)
    ).issue_access(uuid.uuid4())
    headers = [
        None,
        "Basic abc",
        "Bearer garbage",
        f"Bearer {expired}",
        f"Bearer {tokens.issue_refresh(uuid.uuid4())}",
    ]
    messages = set()
    for header in headers:
        with pytest.raises(Unauthenticated) as excinfo:
            authenticate(header, tokens)
        messages.add(excinfo.value.message)
    assert messages == {"Authentication required"}


# ---------------------------------------------------------------------------
# Over HTTP
# ---------------------------------------------------------------------------


def test_protected_route_without_header_returns_401(client):
    resp = client.get("/api/projects")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Authentication required"}
    assert resp.headers["WWW-Authenticate"] == "Bearer"


def test_protected_route_with_refresh_token_returns_401(client, tokens):
    resp = client.get("/api/projects", headers=bearer(tokens.issue_refresh(uuid.uuid4())))
    assert resp.status_code == 401
    assert resp.json() == {"error": "Authentication required"}


def test_protected_route_with_wrong_scheme_returns_401(client, tokens):
    token = tokens.issue_access(uuid.uuid4())
    resp = client.get("/api/projects", headers={"Authorization": f"Token {token}"})
    assert resp.status_code == 401


def test_valid_token_reaches_handler(client, register):
    body = register("alice@example.com")
    resp = client.get("/api/projects", headers=bearer(body["access_token"]))
    assert resp.status_code == 200
    assert resp.json() == []

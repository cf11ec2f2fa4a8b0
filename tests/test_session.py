from __future__ import annotations

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from adapters.http_client import REFRESH_PATH
from core.domain.identity import LoginResponse, User
from core.errors import ApiError, SessionExpiredError
from core.services.session import SessionManager, session_from_login
from core.tokens import decode_claims, token_expiry

from conftest import make_session, make_token, ok

USER = {
    "id": "u1",
    "email": "ops@example.com",
    "name": "Ops",
    "userType": "ADMIN",
    "tenantId": "tenant-1",
    "role": {"name": "Admin", "permissions": ["parcels:read", "users:read"]},
}


def test_decode_claims_reads_unsigned_payload():
    token = make_token(60, email="ops@example.com", permissions=["parcels:read"])

    claims = decode_claims(token)

    assert claims["email"] == "ops@example.com"
    assert claims["permissions"] == ["parcels:read"]
    assert token_expiry(token) is not None


@pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
def test_decode_claims_is_empty_for_malformed_tokens(token):
    assert decode_claims(token) == {}
    assert token_expiry(token) is None


def test_session_from_login_uses_exp_claim_and_claim_permissions():
    token = make_token(900, permissions=["payments:read"])
    response = LoginResponse.model_validate({"user": USER, "token": token, "refreshToken": "r1"})

    session = session_from_login(response)

    assert session.access_token == token
    assert session.refresh_token == "r1"
    assert session.expires_at == token_expiry(token)
    assert session.permissions == ["payments:read"]
    assert session.tenant_id == "tenant-1"


def test_session_from_login_falls_back_to_expires_in_and_role_permissions():
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    response = LoginResponse.model_validate({"user": USER, "accessToken": "opaque", "expiresIn": 120})

    session = session_from_login(response, "explicit-tenant", now=now)

    assert session.expires_at == now + timedelta(seconds=120)
    assert session.permissions == ["parcels:read", "users:read"]
    assert session.tenant_id == "explicit-tenant"


def test_session_from_login_requires_a_token():
    with pytest.raises(ValueError):
        session_from_login(LoginResponse.model_validate({"user": USER, "accountStatus": "PENDING"}))


async def test_login_persists_session_and_sets_tenant(client, store, backend):
    token = make_token(3600)
    backend.add("POST", "/api/auth/login", ok({"user": USER, "token": token, "refreshToken": "r1"}))
    manager = SessionManager(client)

    user = await manager.login("ops@example.com", "secret", tenant_id="tenant-9")

    assert user.email == "ops@example.com"
    sent = backend.requests[0]
    assert sent.headers["X-Tenant-ID"] == "tenant-9"
    assert "Authorization" not in sent.headers
    saved = store.load()
    assert saved.access_token == token
    assert saved.tenant_id == "tenant-9"
    assert manager.is_authenticated()


async def test_login_without_token_returns_none(client, store, backend):
    backend.add(
        "POST",
        "/api/auth/login",
        ok({"user": USER, "accountStatus": "PENDING", "requiresApproval": True}),
    )

    assert await SessionManager(client).login("ops@example.com", "secret") is None
    assert store.load() is None


async def test_login_rejects_bad_credentials(client, backend):
    backend.add("POST", "/api/auth/login", httpx.Response(401, json={"message": "Invalid credentials"}))

    with pytest.raises(ApiError):
        await SessionManager(client).login("ops@example.com", "wrong")


async def test_logout_clears_locally_even_if_server_fails(client, store, backend):
    store.save(make_session())
    backend.add("POST", "/api/auth/logout", httpx.Response(500, json={"message": "down"}))

    await SessionManager(client).logout()

    assert store.load() is None
    assert len(backend.calls("POST", "/api/auth/logout")) == 1


async def test_refresh_reports_success_and_failure(client, store, backend):
    store.save(make_session())
    backend.add("POST", REFRESH_PATH, ok({"accessToken": make_token(7200)}), httpx.Response(401))
    manager = SessionManager(client)

    assert await manager.refresh() is True
    assert await manager.refresh() is False
    assert store.load() is None


def test_token_validity_windows(client, store):
    now = datetime.now(timezone.utc)
    manager = SessionManager(client)

    store.save(make_session().model_copy(update={"expires_at": now + timedelta(seconds=400)}))
    assert manager.is_token_valid(now)
    assert manager.needs_refresh(now)

    store.save(make_session().model_copy(update={"expires_at": now + timedelta(seconds=200)}))
    assert not manager.is_token_valid(now)
    assert manager.needs_refresh(now)

    store.save(make_session().model_copy(update={"expires_at": now + timedelta(hours=2)}))
    assert manager.is_token_valid(now)
    assert not manager.needs_refresh(now)

    store.save(make_session().model_copy(update={"expires_at": now - timedelta(seconds=1)}))
    assert not manager.is_token_valid(now)
    assert not manager.needs_refresh(now)


def test_no_session_is_never_valid(client):
    manager = SessionManager(client)

    assert not manager.is_token_valid()
    assert not manager.needs_refresh()
    assert not manager.is_authenticated()
    assert manager.principal().is_anonymous


async def test_ensure_fresh_refreshes_inside_window(client, store, backend):
    store.save(make_session(seconds=120))
    renewed = make_token(7200)
    backend.add("POST", REFRESH_PATH, ok({"accessToken": renewed}))

    session = await SessionManager(client).ensure_fresh()

    assert session.access_token == renewed


async def test_ensure_fresh_raises_when_refresh_fails(client, store, backend):
    store.save(make_session(seconds=120))
    backend.add("POST", REFRESH_PATH, httpx.Response(400))

    with pytest.raises(SessionExpiredError):
        await SessionManager(client).ensure_fresh()


def test_principal_from_stored_user(client, store):
    store.save(make_session(user=User.model_validate(USER), permissions=["parcels:read"]))

    principal = SessionManager(client).principal()

    assert principal.user_id == "u1"
    assert principal.has_role("admin")
    assert principal.has_permission("parcels:read")
    assert not principal.has_permission("users:read")


def test_principal_from_claims_when_no_user(client, store):
    token = make_token(3600, email="x@y.z", userType="SELLER", permissions=["parcels:read"])
    store.save(make_session(access_token=token))

    principal = SessionManager(client).principal()

    assert principal.email == "x@y.z"
    assert principal.user_type == "SELLER"
    assert principal.has_permission("parcels:read")


def test_session_info(client, store):
    store.save(make_session(tenant_id="t1", permissions=["a"]))

    info = SessionManager(client).session_info()

    assert info["tenant_id"] == "t1"
    assert info["permissions"] == ["a"]
    assert info["is_authenticated"] is False


async def test_refresh_of_opaque_token_uses_expires_in(client, store, backend):
    now = datetime.now(timezone.utc)
    store.save(make_session(access_token="opaque-1").model_copy(update={"expires_at": now + timedelta(seconds=60)}))
    backend.add("POST", REFRESH_PATH, ok({"accessToken": "opaque-2", "refreshToken": "r2", "expiresIn": 3600}))
    manager = SessionManager(client)

    assert await manager.refresh() is True

    saved = store.load()
    assert saved.access_token == "opaque-2"
    assert saved.refresh_token == "r2"
    assert saved.expires_at is not None
    assert saved.expires_at > now + timedelta(seconds=3000)
    assert manager.is_token_valid()
    assert not manager.needs_refresh()

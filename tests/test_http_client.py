from __future__ import annotations

import asyncio
import logging

import httpx
import pytest

from adapters.http_client import REFRESH_PATH, ApiClient, parse_page, unwrap
from core.domain.common import Page
from core.domain.parcels import Zone
from core.errors import ApiError, ErrorCode, SessionExpiredError, UnexpectedResponseError

from conftest import make_session, make_token, ok, request_json


async def test_adds_bearer_and_tenant_headers(client, store, backend):
    session = make_session(tenant_id="tenant-7")
    store.save(session)
    backend.add("GET", "/api/users/me", ok({"id": "u1", "email": "a@b.c"}))

    data = await client.get("/api/users/me", service="users")

    assert data == {"id": "u1", "email": "a@b.c"}
    sent = backend.requests[0]
    assert sent.headers["Authorization"] == f"Bearer {session.access_token}"
    assert sent.headers["X-Tenant-ID"] == "tenant-7"
    assert sent.headers["Content-Type"] == "application/json"


async def test_explicit_tenant_wins_over_session(client, store, backend):
    store.save(make_session(tenant_id="from-session"))
    client.set_tenant("explicit")
    backend.add("GET", "/api/tenants/current", ok({}))

    await client.get("/api/tenants/current", service="tenants")

    assert backend.requests[0].headers["X-Tenant-ID"] == "explicit"
    assert store.load().tenant_id == "explicit"


async def test_no_headers_without_session_or_tenant(client, backend):
    backend.add("GET", "/api/health", ok({"status": "ok"}))

    await client.get("/api/health", service="auth")

    sent = backend.requests[0]
    assert "Authorization" not in sent.headers
    assert "X-Tenant-ID" not in sent.headers


async def test_service_url_override(settings, store, backend):
    settings = settings.model_copy(update={"service_urls": {"parcels": "http://parcels.test"}})
    backend.add("GET", "/api/parcels", ok([]))
    backend.add("GET", "/api/users", ok([]))
    async with ApiClient(settings, token_store=store, transport=backend.transport) as api:
        await api.get("/api/parcels", service="parcels")
        await api.get("/api/users", service="users")

    assert backend.requests[0].url.host == "parcels.test"
    assert backend.requests[1].url.host == "api.test"


async def test_401_refreshes_once_and_retries(client, store, backend):
    old = make_session(refresh_token="r-old")
    store.save(old)
    new_token = make_token(7200)

    def me(request: httpx.Request) -> httpx.Response:
        if request.headers["Authorization"] == f"Bearer {new_token}":
            return ok({"id": "u1", "email": "a@b.c"})
        return httpx.Response(401, json={"message": "jwt expired"})

    backend.add("GET", "/api/users/me", me)
    backend.add("POST", REFRESH_PATH, ok({"accessToken": new_token, "refreshToken": "r-new"}))

    data = await client.get("/api/users/me", service="users")

    assert data["id"] == "u1"
    refresh_calls = backend.calls("POST", REFRESH_PATH)
    assert len(refresh_calls) == 1
    assert request_json(refresh_calls[0]) == {"refreshToken": "r-old"}
    assert "Authorization" not in refresh_calls[0].headers
    assert len(backend.calls("GET", "/api/users/me")) == 2
    saved = store.load()
    assert saved.access_token == new_token
    assert saved.refresh_token == "r-new"
    assert saved.expires_at is not None


async def test_refresh_keeps_previous_refresh_token(client, store, backend):
    store.save(make_session(refresh_token="keep-me"))
    backend.add("GET", "/api/parcels", httpx.Response(401), ok([]))
    backend.add("POST", REFRESH_PATH, ok({"token": make_token()}))

    await client.get("/api/parcels", service="parcels")

    assert store.load().refresh_token == "keep-me"


async def test_second_401_is_not_retried_again(client, store, backend):
    store.save(make_session())
    backend.add("GET", "/api/roles", httpx.Response(401, json={"message": "nope"}))
    backend.add("POST", REFRESH_PATH, ok({"accessToken": make_token()}))

    with pytest.raises(ApiError) as excinfo:
        await client.get("/api/roles", service="roles")

    assert excinfo.value.code is ErrorCode.AUTH_ERROR
    assert not isinstance(excinfo.value, SessionExpiredError)
    assert len(backend.calls("POST", REFRESH_PATH)) == 1
    assert len(backend.calls("GET", "/api/roles")) == 2


async def test_failed_refresh_clears_session_and_calls_hook(settings, store, backend):
    store.save(make_session())
    backend.add("GET", "/api/payments", httpx.Response(401))
    backend.add("POST", REFRESH_PATH, httpx.Response(401, json={"message": "refresh revoked"}))
    expired: list[bool] = []

    async def on_expired() -> None:
        expired.append(True)

    async with ApiClient(settings, token_store=store, transport=backend.transport, on_session_expired=on_expired) as api:
        with pytest.raises(SessionExpiredError):
            await api.get("/api/payments", service="payments")

    assert store.load() is None
    assert expired == [True]


async def test_401_without_refresh_token_expires_session(client, store, backend):
    store.save(make_session(refresh_token=None))
    backend.add("GET", "/api/parcels", httpx.Response(401))

    with pytest.raises(SessionExpiredError):
        await client.get("/api/parcels", service="parcels")

    assert store.load() is None
    assert backend.calls("POST", REFRESH_PATH) == []


async def test_unauthenticated_call_does_not_refresh(client, store, backend):
    store.save(make_session())
    backend.add("POST", "/api/auth/login", httpx.Response(401, json={"message": "Invalid credentials"}))

    with pytest.raises(ApiError) as excinfo:
        await client.post("/api/auth/login", {"email": "x", "password": "y"}, service="auth", authenticated=False)

    assert excinfo.value.message == "Invalid credentials"
    assert "Authorization" not in backend.requests[0].headers
    assert backend.calls("POST", REFRESH_PATH) == []
    assert store.load() is not None


async def test_concurrent_401s_share_one_refresh(client, store, backend):
    store.save(make_session())
    new_token = make_token(7200)

    def parcels(request: httpx.Request) -> httpx.Response:
        if request.headers["Authorization"] == f"Bearer {new_token}":
            return ok([])
        return httpx.Response(401)

    backend.add("GET", "/api/parcels", parcels)
    backend.add("POST", REFRESH_PATH, ok({"accessToken": new_token}))

    await asyncio.gather(*(client.get("/api/parcels", service="parcels") for _ in range(3)))

    assert len(backend.calls("POST", REFRESH_PATH)) == 1


@pytest.mark.parametrize(
    ("status", "code"),
    [
        (400, ErrorCode.VALIDATION_ERROR),
        (403, ErrorCode.PERMISSION_ERROR),
        (404, ErrorCode.NOT_FOUND),
        (409, ErrorCode.CONFLICT),
        (429, ErrorCode.RATE_LIMIT_ERROR),
        (503, ErrorCode.SERVER_ERROR),
    ],
)
async def test_error_status_mapping(client, backend, status, code):
    backend.add("GET", "/api/zones", httpx.Response(status, json={"message": "boom"}, headers={"x-request-id": "req-1"}))

    with pytest.raises(ApiError) as excinfo:
        await client.get("/api/zones", service="parcels")

    assert excinfo.value.code is code
    assert excinfo.value.status_code == status
    assert excinfo.value.request_id == "req-1"


async def test_transport_errors_are_normalised(client, backend):
    def down(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    def slow(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    backend.add("GET", "/api/down", down)
    backend.add("GET", "/api/slow", slow)

    with pytest.raises(ApiError) as network:
        await client.get("/api/down")
    with pytest.raises(ApiError) as timeout:
        await client.get("/api/slow")

    assert network.value.code is ErrorCode.NETWORK_ERROR
    assert timeout.value.code is ErrorCode.TIMEOUT_ERROR


async def test_no_content_returns_none(client, backend):
    backend.add("DELETE", "/api/zones/z1", httpx.Response(204))

    assert await client.delete("/api/zones/z1", service="parcels") is None


async def test_get_bytes_returns_raw_content(client, backend):
    backend.add("GET", "/api/shipping-slips/s1/pdf", httpx.Response(200, content=b"%PDF-1.4"))

    assert await client.get_bytes("/api/shipping-slips/s1/pdf", service="parcels") == b"%PDF-1.4"


def test_unwrap():
    assert unwrap({"success": True, "data": {"id": 1}}) == {"id": 1}
    assert unwrap({"success": True, "data": None, "message": "ok"}) == {"success": True, "data": None, "message": "ok"}
    assert unwrap([1, 2]) == [1, 2]


def test_parse_page_with_pagination():
    body = {
        "data": [{"id": "z1", "name": "North"}],
        "pagination": {"page": 2, "limit": 1, "total": 5, "totalPages": 5, "hasNext": True, "hasPrev": True},
    }

    page = parse_page(body, Zone)

    assert isinstance(page, Page)
    assert page.items[0].name == "North"
    assert page.pagination.page == 2
    assert page.pagination.total_pages == 5


def test_parse_page_with_meta_and_bare_list():
    meta_page = parse_page({"data": [{"id": "z1", "name": "A"}], "meta": {"page": 1, "total": 1}}, Zone)
    bare = parse_page([{"id": "z1", "name": "A"}, {"id": "z2", "name": "B"}], Zone)

    assert meta_page.pagination.total == 1
    assert len(bare) == 2
    assert bare.pagination.total == 2
    assert bare.pagination.has_next is False


def test_parse_page_wraps_single_object_and_nested_data():
    single = parse_page({"success": True, "data": {"id": "z1", "name": "A"}}, Zone)
    nested = parse_page({"success": True, "data": {"data": [{"id": "z1", "name": "A"}], "meta": {"total": 1}}}, Zone)

    assert [z.id for z in single.items] == ["z1"]
    assert [z.id for z in nested.items] == ["z1"]


def test_parse_page_rejects_unknown_shapes():
    with pytest.raises(UnexpectedResponseError):
        parse_page({"items": "nope"})
    with pytest.raises(UnexpectedResponseError):
        parse_page({"data": [{"id": "z1"}]}, Zone)


def _refresh_unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


@pytest.mark.parametrize(
    ("reply", "fragment"),
    [
        (httpx.Response(401, json={"message": "revoked"}), "rejected with status 401"),
        (ok({"unexpected": True}), "unusable payload"),
        (_refresh_unreachable, "Token refresh failed"),
    ],
)
async def test_refresh_failures_log_warnings(client, store, backend, caplog, reply, fragment):
    store.save(make_session())
    backend.add("POST", REFRESH_PATH, reply)

    with caplog.at_level(logging.WARNING, logger="adapters.http_client"):
        with pytest.raises(SessionExpiredError):
            await client.refresh_tokens()

    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert any(fragment in message for message in warnings)
    assert store.load() is None


async def test_missing_refresh_token_logs_warning(client, store, caplog):
    store.save(make_session(refresh_token=None))

    with caplog.at_level(logging.WARNING, logger="adapters.http_client"):
        with pytest.raises(SessionExpiredError):
            await client.refresh_tokens()

    assert "No refresh token stored" in caplog.text

from __future__ import annotations

import json
import time
from collections import defaultdict
from typing import Any, Callable

import httpx
import jwt
import pytest

from adapters.http_client import ApiClient
from adapters.token_store import MemoryTokenStore
from core.config import AppSettings
from core.domain.identity import Session
from core.tokens import token_expiry

JWT_TEST_KEY = "colisdesk-test-signing-key-0123456789abcdef"

Handler = Callable[[httpx.Request], httpx.Response]


def make_token(seconds: int = 3600, **claims: Any) -> str:
    payload = {"sub": "user-1", "exp": int(time.time()) + seconds, **claims}
    return jwt.encode(payload, JWT_TEST_KEY, algorithm="HS256")


def make_session(*, seconds: int = 3600, refresh_token: str | None = "refresh-1", **fields: Any) -> Session:
    token = fields.pop("access_token", None) or make_token(seconds)
    return Session(
        access_token=token,
        refresh_token=refresh_token,
        expires_at=token_expiry(token),
        **fields,
    )


def ok(data: Any = None, status: int = 200, **extra: Any) -> httpx.Response:
    return httpx.Response(status, json={"success": True, "data": data, **extra})


class FakeBackend:
    """Router mínimo sobre `httpx.MockTransport`.

    Cada ruta tiene una cola de respuestas; la última se repite.
    """

    def __init__(self) -> None:
        self._routes: dict[tuple[str, str], list[httpx.Response | Handler]] = defaultdict(list)
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, *responses: httpx.Response | Handler) -> None:
        self._routes[(method.upper(), path)].extend(responses)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and r.url.path == path]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"message": f"no route for {request.method} {request.url.path}"})
        entry = queue.pop(0) if len(queue) > 1 else queue[0]
        if callable(entry):
            return entry(request)
        return httpx.Response(entry.status_code, headers=entry.headers, content=entry.content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content) if request.content else None


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    return AppSettings(
        _env_file=None,
        api_base_url="http://api.test",
        tenant_id=None,
        session_file=tmp_path / "session.json",
        log_level="DEBUG",
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def store() -> MemoryTokenStore:
    return MemoryTokenStore()


@pytest.fixture
async def client(settings, store, backend):
    api = ApiClient(settings, token_store=store, transport=backend.transport)
    yield api
    await api.aclose()

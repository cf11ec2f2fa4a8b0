"""Cliente HTTP del back-office sobre httpx.

Por qué un wrapper:
- Estandariza timeouts, headers (auth + tenant), logging y mapeo de errores.
- Centraliza el refresh de token: un 401 dispara como mucho un refresh y un
  único reintento de la request original.
- Facilita testeo: se inyecta un `httpx.MockTransport` y un `TokenStore` en
  memoria.

Reglas:
- Varias requests concurrentes que reciben 401 comparten un único refresh.
- Si el refresh falla se borra la sesión y se lanza `SessionExpiredError`.
- Las respuestas `{success, data}` se desenvuelven en `get/post/...`.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from adapters.token_store import MemoryTokenStore
from core.config import AppSettings
from core.domain.common import Page, Pagination
from core.domain.identity import Session, TokenPair
from core.errors import ApiError, ErrorCode, SessionExpiredError, UnexpectedResponseError
from core.interfaces.token_store import TokenStore
from core.tokens import token_expiry

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

REFRESH_PATH = "/api/auth/refresh"


def build_async_client(
    settings: AppSettings | None = None,
    *,
    base_url: str | None = None,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con los defaults del back-office."""

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=base_url or settings.api_base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def unwrap(body: Any) -> Any:
    """`{success, data}` -> `data`; cualquier otra forma se devuelve tal cual."""

    if isinstance(body, dict) and body.get("data") is not None:
        return body["data"]
    return body


def parse_page(body: Any, model: type[M] | None = None) -> Page[Any]:
    """Normaliza las formas de listado que devuelve el backend.

    Formas aceptadas:
    - `{data: [...], pagination|meta: {...}}`
    - `{data: [...]}` o `[...]` (una sola página implícita)
    - `{success, data: {...}}` (un único objeto, se envuelve en lista)
    """

    meta: Any = None
    if isinstance(body, list):
        items = body
    elif isinstance(body, dict) and isinstance(body.get("data"), list):
        items = body["data"]
        meta = body.get("pagination") or body.get("meta")
    elif isinstance(body, dict) and isinstance(body.get("data"), dict):
        inner = body["data"]
        if isinstance(inner.get("data"), list):
            # {success, data: {data: [...], meta}}
            return parse_page(inner, model)
        items = [inner]
    else:
        raise UnexpectedResponseError("Unexpected paginated response shape", details=body)

    try:
        pagination = Pagination.model_validate(meta) if isinstance(meta, dict) else Pagination.single_page(len(items))
        parsed = [model.model_validate(item) for item in items] if model else list(items)
    except ValidationError as exc:
        raise UnexpectedResponseError("Invalid paginated response", details=exc.errors()) from exc
    return Page(items=parsed, pagination=pagination)


def _response_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class ApiClient:
    """Cliente asíncrono compartido por todos los `ResourceClient`.

    Mantiene un `httpx.AsyncClient` por servicio (cada servicio puede tener su
    propia base URL) y la sesión vía `TokenStore`.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        token_store: TokenStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        tenant_id: str | None = None,
        on_session_expired: Callable[[], Awaitable[None] | None] | None = None,
    ) -> None:
        self.settings = settings or AppSettings()
        self.token_store: TokenStore = token_store if token_store is not None else MemoryTokenStore()
        self.on_session_expired = on_session_expired
        self._transport = transport
        self._tenant_id = tenant_id or self.settings.tenant_id
        self._clients: dict[str, httpx.AsyncClient] = {}
        self._refresh_lock = asyncio.Lock()

    # -- ciclo de vida -------------------------------------------------------

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        clients, self._clients = list(self._clients.values()), {}
        for client in clients:
            await client.aclose()

    def _client(self, service: str | None) -> httpx.AsyncClient:
        key = service or ""
        client = self._clients.get(key)
        if client is None:
            base_url = self.settings.service_url(service) if service else self.settings.api_base_url
            client = build_async_client(self.settings, base_url=base_url, transport=self._transport)
            self._clients[key] = client
        return client

    # -- tenant --------------------------------------------------------------

    @property
    def tenant_id(self) -> str | None:
        if self._tenant_id:
            return self._tenant_id
        session = self.token_store.load()
        return session.tenant_id if session else None

    def set_tenant(self, tenant_id: str) -> None:
        self._tenant_id = tenant_id
        session = self.token_store.load()
        if session is not None and session.tenant_id != tenant_id:
            self.token_store.save(session.model_copy(update={"tenant_id": tenant_id}))

    def clear_tenant(self) -> None:
        self._tenant_id = None
        session = self.token_store.load()
        if session is not None and session.tenant_id:
            self.token_store.save(session.model_copy(update={"tenant_id": None}))

    # -- envío ---------------------------------------------------------------

    def _headers(self, access_token: str | None, extra: dict[str, str] | None, *, json_body: bool) -> dict[str, str]:
        headers: dict[str, str] = {}
        if json_body:
            headers["Content-Type"] = "application/json"
        tenant_id = self.tenant_id
        if tenant_id:
            headers[self.settings.tenant_header] = tenant_id
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        if extra:
            headers.update(extra)
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        *,
        service: str | None,
        access_token: str | None,
        params: dict[str, Any] | None = None,
        json: Any = None,
        data: dict[str, Any] | None = None,
        files: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        client = self._client(service)
        request_headers = self._headers(access_token, headers, json_body=files is None and data is None)
        started = time.perf_counter()
        try:
            response = await client.request(
                method,
                path,
                params=params,
                json=json,
                data=data,
                files=files,
                headers=request_headers,
            )
        except httpx.TimeoutException as exc:
            raise ApiError(ErrorCode.TIMEOUT_ERROR, "Request timeout, please try again") from exc
        except httpx.TransportError as exc:
            raise ApiError(ErrorCode.NETWORK_ERROR, "Network error, check your connection") from exc

        elapsed = time.perf_counter() - started
        if elapsed > self.settings.slow_request_seconds:
            logger.warning("Slow request: %s %s took %.2fs", method, path, elapsed)
        else:
            logger.debug("%s %s -> %s (%.2fs)", method, path, response.status_code, elapsed)
        return response

    async def request(
        self,
        method: str,
        path: str,
        *,
        service: str | None = None,
        params: dict[str, Any] | None = None,
        json: Any = None,
        data: dict[str, Any] | None = None,
        files: Any = None,
        headers: dict[str, str] | None = None,
        authenticated: bool = True,
    ) -> httpx.Response:
        """Ejecuta la request y devuelve la respuesta 2xx, o lanza `ApiError`."""

        session = self.token_store.load() if authenticated else None
        token = session.access_token if session else None
        kwargs: dict[str, Any] = dict(params=params, json=json, data=data, files=files, headers=headers)

        response = await self._send(method, path, service=service, access_token=token, **kwargs)
        if response.status_code == 401 and authenticated and path != REFRESH_PATH:
            refreshed = await self.refresh_tokens(stale_token=token)
            response = await self._send(
                method, path, service=service, access_token=refreshed.access_token, **kwargs
            )

        if response.is_error:
            error = ApiError.from_status(response.status_code, _response_body(response))
            if error.request_id is None:
                error.request_id = response.headers.get("x-request-id")
            logger.debug("API error %r", error)
            raise error
        return response

    # -- refresh -------------------------------------------------------------

    async def _expire_session(self) -> None:
        self.token_store.clear()
        if self.on_session_expired is not None:
            result = self.on_session_expired()
            if asyncio.iscoroutine(result):
                await result

    async def refresh_tokens(self, *, stale_token: str | None = None) -> Session:
        """Renueva el access token con el refresh token guardado.

        Si otro coroutine ya rotó el token (el guardado ya no es `stale_token`)
        se reutiliza sin llamar de nuevo al backend.
        """

        async with self._refresh_lock:
            session = self.token_store.load()
            if session is None or not session.refresh_token:
                logger.warning("No refresh token stored, session expired")
                await self._expire_session()
                raise SessionExpiredError()
            if stale_token is not None and session.access_token != stale_token:
                return session

            try:
                response = await self._send(
                    "POST",
                    REFRESH_PATH,
                    service="auth",
                    access_token=None,
                    json={"refreshToken": session.refresh_token},
                )
            except ApiError as exc:
                logger.warning("Token refresh failed: %s", exc.message)
                await self._expire_session()
                raise SessionExpiredError() from exc
            if response.is_error:
                logger.warning("Token refresh rejected with status %s", response.status_code)
                await self._expire_session()
                raise SessionExpiredError()

            try:
                pair = TokenPair.model_validate(unwrap(_response_body(response)))
            except ValidationError as exc:
                logger.warning("Token refresh returned an unusable payload")
                await self._expire_session()
                raise SessionExpiredError() from exc

            expires_at = token_expiry(pair.access_token)
            if expires_at is None and pair.expires_in:
                expires_at = datetime.now(timezone.utc) + timedelta(seconds=pair.expires_in)
            renewed = session.model_copy(
                update={
                    "access_token": pair.access_token,
                    "refresh_token": pair.refresh_token or session.refresh_token,
                    "expires_at": expires_at,
                }
            )
            self.token_store.save(renewed)
            logger.info("Access token refreshed")
            return renewed

    # -- verbos --------------------------------------------------------------

    async def get(self, path: str, *, params: dict[str, Any] | None = None, service: str | None = None) -> Any:
        response = await self.request("GET", path, service=service, params=params)
        return unwrap(_response_body(response))

    async def post(
        self,
        path: str,
        json: Any = None,
        *,
        params: dict[str, Any] | None = None,
        files: Any = None,
        data: dict[str, Any] | None = None,
        service: str | None = None,
        authenticated: bool = True,
    ) -> Any:
        response = await self.request(
            "POST",
            path,
            service=service,
            params=params,
            json=json,
            files=files,
            data=data,
            authenticated=authenticated,
        )
        return unwrap(_response_body(response))

    async def put(self, path: str, json: Any = None, *, service: str | None = None) -> Any:
        response = await self.request("PUT", path, service=service, json=json)
        return unwrap(_response_body(response))

    async def patch(self, path: str, json: Any = None, *, service: str | None = None) -> Any:
        response = await self.request("PATCH", path, service=service, json=json)
        return unwrap(_response_body(response))

    async def delete(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        service: str | None = None,
    ) -> Any:
        response = await self.request("DELETE", path, service=service, params=params, json=json)
        return unwrap(_response_body(response))

    async def get_paginated(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        model: type[M] | None = None,
        service: str | None = None,
    ) -> Page[Any]:
        response = await self.request("GET", path, service=service, params=params)
        return parse_page(_response_body(response), model)

    async def get_bytes(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        method: str = "GET",
        json: Any = None,
        service: str | None = None,
    ) -> bytes:
        """Descarga binaria (PDF, XLSX, CSV)."""

        response = await self.request(method, path, service=service, params=params, json=json)
        return response.content

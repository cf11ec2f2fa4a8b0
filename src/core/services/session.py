"""Gestión de la sesión del operador.

Responsabilidad:
- Convertir la respuesta de login en una `Session` persistida en el `TokenStore`.
- Decidir cuándo el access token ya no es válido o conviene refrescarlo.
- Exponer el `Principal` actual para el filtrado de navegación.

Reglas:
- Un token es válido si expira más tarde que `ahora + token_refresh_buffer_seconds`.
- Se refresca cuando quedan menos de `token_refresh_window_seconds` y todavía
  no ha expirado.
- El logout local ocurre siempre, aunque el backend falle.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any

from adapters.api.identity import AuthApiClient
from adapters.http_client import ApiClient
from core.config import AppSettings
from core.domain.identity import LoginRequest, LoginResponse, Session, User
from core.domain.permissions import ANONYMOUS, Principal
from core.errors import ApiError, SessionExpiredError
from core.interfaces.token_store import TokenStore
from core.tokens import decode_claims, token_expiry

logger = logging.getLogger(__name__)


def _login_permissions(response: LoginResponse, claims: dict[str, Any]) -> list[str]:
    from_claims = claims.get("permissions")
    if isinstance(from_claims, list) and from_claims:
        return [str(p) for p in from_claims]
    user = response.user
    if user is None:
        return []
    if user.permissions:
        return list(user.permissions)
    return list(user.role.permissions or []) if user.role else []


def session_from_login(
    response: LoginResponse,
    tenant_id: str | None = None,
    *,
    now: datetime | None = None,
) -> Session:
    """Construye la sesión a partir de la respuesta de `/api/auth/login`.

    La expiración sale del claim `exp`; si el token no es un JWT legible se
    usa `expiresIn` relativo a `now`.
    """

    if not response.access_token:
        raise ValueError("login response carries no access token")

    claims = decode_claims(response.access_token)
    expires_at = token_expiry(response.access_token)
    if expires_at is None and response.expires_in:
        expires_at = (now or datetime.now(timezone.utc)) + timedelta(seconds=response.expires_in)

    tenant = tenant_id
    if tenant is None and response.user is not None:
        tenant = response.user.effective_tenant_id
    if tenant is None and isinstance(claims.get("tenantId"), str):
        tenant = claims["tenantId"]

    return Session(
        access_token=response.access_token,
        refresh_token=response.refresh_token,
        expires_at=expires_at,
        user=response.user,
        permissions=_login_permissions(response, claims),
        tenant_id=tenant,
    )


class SessionManager:
    def __init__(
        self,
        client: ApiClient,
        store: TokenStore | None = None,
        settings: AppSettings | None = None,
    ) -> None:
        self.client = client
        self.store = store if store is not None else client.token_store
        self.settings = settings or client.settings
        self.auth = AuthApiClient(client)

    @property
    def session(self) -> Session | None:
        return self.store.load()

    async def login(self, email: str, password: str, tenant_id: str | None = None) -> User | None:
        """Autentica y persiste la sesión.

        Devuelve `None` cuando el backend acepta las credenciales pero no emite
        token (cuenta pendiente de aprobación o de validación). Las
        credenciales inválidas se propagan como `ApiError`.
        """

        if tenant_id:
            self.client.set_tenant(tenant_id)

        response = await self.auth.login(LoginRequest(email=email, password=password))
        if not response.access_token:
            logger.info("Login accepted without token (status=%s)", response.account_status)
            return None

        session = session_from_login(response, tenant_id or self.client.tenant_id)
        self.store.save(session)
        logger.info("Logged in as %s", email)
        return response.user

    async def logout(self) -> None:
        session = self.store.load()
        try:
            if session is not None and session.refresh_token:
                await self.auth.logout(session.refresh_token)
        except ApiError as exc:
            logger.warning("Server logout failed: %s", exc.message)
        finally:
            self.store.clear()

    async def refresh(self) -> bool:
        try:
            await self.client.refresh_tokens()
        except SessionExpiredError:
            return False
        return True

    def is_token_valid(self, now: datetime | None = None) -> bool:
        session = self.store.load()
        if session is None or not session.access_token:
            return False
        left = session.seconds_left(now)
        if left is None:
            return False
        return left > self.settings.token_refresh_buffer_seconds

    def needs_refresh(self, now: datetime | None = None) -> bool:
        session = self.store.load()
        if session is None:
            return False
        left = session.seconds_left(now)
        if left is None:
            return False
        return 0 < left < self.settings.token_refresh_window_seconds

    async def ensure_fresh(self, now: datetime | None = None) -> Session | None:
        """Refresca por adelantado si el token está a punto de expirar."""

        if self.needs_refresh(now):
            return await self.client.refresh_tokens()
        return self.store.load()

    def principal(self) -> Principal:
        session = self.store.load()
        if session is None:
            return ANONYMOUS
        if session.user is not None:
            return Principal.from_user(session.user, session.permissions or None)
        claims = decode_claims(session.access_token)
        if not claims:
            return ANONYMOUS
        principal = Principal.from_claims(claims)
        if session.permissions and not principal.permissions:
            principal = replace(principal, permissions=frozenset(session.permissions))
        return principal

    def is_authenticated(self, now: datetime | None = None) -> bool:
        session = self.store.load()
        return session is not None and session.user is not None and self.is_token_valid(now)

    def session_info(self, now: datetime | None = None) -> dict[str, Any]:
        session = self.store.load()
        return {
            "is_authenticated": self.is_authenticated(now),
            "user": session.user if session else None,
            "permissions": list(session.permissions) if session else [],
            "expires_at": session.expires_at if session else None,
            "tenant_id": session.tenant_id if session else None,
        }

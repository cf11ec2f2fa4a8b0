"""Clientes del servicio de identidad: auth, usuarios, roles y tenants."""

from __future__ import annotations

from typing import Any

from adapters.api.base import ResourceClient
from adapters.http_client import unwrap
from core.domain.common import BulkOperationResult, ExportResult, Page
from core.domain.identity import (
    AccountStatusResponse,
    AvailablePermissions,
    CompleteProfileRequest,
    CreateRoleRequest,
    CreateTenantRequest,
    CreateUserRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    Role,
    RoleFilters,
    Tenant,
    TenantFilters,
    TenantStats,
    TokenPair,
    UpdateRoleRequest,
    UpdateTenantRequest,
    UpdateUserRequest,
    User,
    UserActivity,
    UserFilters,
    UserPermissions,
    UserStatistics,
)


class AuthApiClient(ResourceClient):
    service = "auth"

    async def login(self, request: LoginRequest) -> LoginResponse:
        return await self._post("/api/auth/login", request, LoginResponse, authenticated=False)

    async def register(self, request: RegisterRequest) -> RegisterResponse:
        return await self._post("/api/auth/register", request, RegisterResponse, authenticated=False)

    async def refresh(self, refresh_token: str) -> TokenPair:
        return await self._post(
            "/api/auth/refresh", {"refreshToken": refresh_token}, TokenPair, authenticated=False
        )

    async def logout(self, refresh_token: str) -> None:
        await self._post("/api/auth/logout", {"refreshToken": refresh_token})

    async def profile(self) -> User:
        return await self._get("/api/auth/profile", User)

    async def status(self) -> AccountStatusResponse:
        return await self._get("/api/auth/status", AccountStatusResponse)

    async def complete_profile(self, request: CompleteProfileRequest) -> User:
        return await self._patch("/api/auth/complete-profile", request, User)

    async def forgot_password(self, email: str) -> dict[str, Any]:
        return await self._post("/api/auth/forgot-password", {"email": email}, authenticated=False)

    async def reset_password(self, token: str, password: str) -> dict[str, Any]:
        return await self._post(
            "/api/auth/reset-password", {"token": token, "password": password}, authenticated=False
        )


class UsersApiClient(ResourceClient):
    service = "users"

    async def create(self, request: CreateUserRequest) -> User:
        return await self._post("/api/users", request, User)

    async def list(self, filters: UserFilters | None = None) -> Page[User]:
        return await self._page("/api/users", User, filters)

    async def get(self, user_id: str) -> User:
        return await self._get(f"/api/users/{user_id}", User)

    async def update(self, user_id: str, request: UpdateUserRequest) -> User:
        return await self._patch(f"/api/users/{user_id}", request, User)

    async def delete(self, user_id: str) -> None:
        await self._delete(f"/api/users/{user_id}")

    async def deactivate(self, user_id: str) -> User:
        return await self._patch(f"/api/users/{user_id}/deactivate", model=User)

    async def reactivate(self, user_id: str) -> User:
        return await self._patch(f"/api/users/{user_id}/reactivate", model=User)

    async def change_password(self, user_id: str, current_password: str, new_password: str) -> dict[str, Any]:
        return await self._patch(
            f"/api/users/{user_id}/change-password",
            {"currentPassword": current_password, "newPassword": new_password},
        )

    async def pending_registrations(self) -> list[User]:
        return await self._list("/api/users/pending-registrations", User)

    async def pending_validations(self) -> list[User]:
        return await self._list("/api/users/pending-validations", User)

    async def approve_registration(self, user_id: str, approve: bool, message: str | None = None) -> User:
        return await self._patch(
            f"/api/users/{user_id}/approve-registration",
            {"approve": approve, "message": message},
            User,
        )

    async def validate_profile(self, user_id: str, action: str, notes: str | None = None) -> User:
        """`action` es `VALIDATE` o `REJECT`."""

        return await self._patch(
            f"/api/users/{user_id}/validate-profile",
            {"action": action, "notes": notes},
            User,
        )

    async def suspend(self, user_id: str) -> User:
        return await self._patch(f"/api/users/{user_id}/suspend", model=User)

    async def me(self) -> User:
        return await self._get("/api/users/me", User)

    async def complete_profile(self, request: CompleteProfileRequest) -> User:
        return await self._patch("/api/users/me/complete-profile", request, User)

    async def assign_role(self, user_id: str, role_id: str) -> User:
        return await self._patch(f"/api/users/{user_id}/role", {"roleId": role_id}, User)

    async def permissions(self, user_id: str) -> UserPermissions:
        return await self._get(f"/api/users/{user_id}/permissions", UserPermissions)

    async def bulk_approve_registrations(self, user_ids: list[str], message: str | None = None) -> BulkOperationResult:
        return await self._post(
            "/api/users/bulk/approve-registrations",
            {"userIds": user_ids, "message": message},
            BulkOperationResult,
        )

    async def bulk_validate_profiles(
        self, user_ids: list[str], action: str, notes: str | None = None
    ) -> BulkOperationResult:
        return await self._post(
            "/api/users/bulk/validate-profiles",
            {"userIds": user_ids, "action": action, "notes": notes},
            BulkOperationResult,
        )

    async def bulk_suspend(self, user_ids: list[str]) -> BulkOperationResult:
        return await self._post("/api/users/bulk/suspend", {"userIds": user_ids}, BulkOperationResult)

    async def export(self, filters: UserFilters | None = None) -> ExportResult:
        payload = {"filters": filters.to_params() if filters else None}
        return await self._post("/api/users/export", payload, ExportResult)

    async def statistics(self) -> UserStatistics:
        return await self._get("/api/users/statistics", UserStatistics)

    async def activity(self, user_id: str, limit: int | None = None) -> list[UserActivity]:
        return await self._list(f"/api/users/{user_id}/activity", UserActivity, params={"limit": limit})


class RolesApiClient(ResourceClient):
    service = "roles"

    async def create(self, request: CreateRoleRequest) -> Role:
        return await self._post("/api/roles", request, Role)

    async def list(self, filters: RoleFilters | None = None) -> Page[Role]:
        return await self._page("/api/roles", Role, filters)

    async def get(self, role_id: str) -> Role:
        return await self._get(f"/api/roles/{role_id}", Role)

    async def update(self, role_id: str, request: UpdateRoleRequest) -> Role:
        return await self._patch(f"/api/roles/{role_id}", request, Role)

    async def delete(self, role_id: str) -> None:
        await self._delete(f"/api/roles/{role_id}")

    async def deactivate(self, role_id: str) -> Role:
        return await self._patch(f"/api/roles/{role_id}/deactivate", model=Role)

    async def reactivate(self, role_id: str) -> Role:
        return await self._patch(f"/api/roles/{role_id}/reactivate", model=Role)

    async def duplicate(self, role_id: str, name: str, user_types: list[str] | None = None) -> Role:
        return await self._post(f"/api/roles/{role_id}/duplicate", {"name": name, "userTypes": user_types}, Role)

    async def users(self, role_id: str, page: int | None = None, limit: int | None = None) -> Page[User]:
        return await self._page(f"/api/roles/{role_id}/users", User, {"page": page, "limit": limit})

    async def by_user_type(self, user_type: str) -> list[Role]:
        data = await self._get(f"/api/roles/user-types/{user_type}/roles")
        roles = data.get("roles", []) if isinstance(data, dict) else data
        return [Role.model_validate(r) for r in roles or []]

    async def available_permissions(self) -> AvailablePermissions:
        return await self._get("/api/roles/permissions", AvailablePermissions)


class TenantsApiClient(ResourceClient):
    service = "tenants"

    async def create(self, request: CreateTenantRequest) -> Tenant:
        return await self._post("/api/tenants", request, Tenant)

    async def list(self, filters: TenantFilters | None = None) -> Page[Tenant]:
        return await self._page("/api/tenants", Tenant, filters)

    async def current(self) -> Tenant:
        return await self._get("/api/tenants/current", Tenant)

    async def update_current(self, request: UpdateTenantRequest) -> Tenant:
        return await self._patch("/api/tenants/current", request, Tenant)

    async def stats(self) -> TenantStats:
        return await self._get("/api/tenants/current/stats", TenantStats)

    async def users(self, filters: UserFilters | None = None) -> Page[User]:
        return await self._page("/api/tenants/current/users", User, filters)

    async def update_settings(self, settings: dict[str, Any]) -> Tenant:
        return await self._patch("/api/tenants/current/settings", settings, Tenant)


class HealthApiClient(ResourceClient):
    """Sondas del backend; no llevan token."""

    service = "auth"

    async def _probe(self, path: str) -> dict[str, Any]:
        response = await self._client.request("GET", path, service=self.service, authenticated=False)
        return unwrap(response.json()) if response.content else {}

    async def health(self) -> dict[str, Any]:
        return await self._probe("/api/health")

    async def ready(self) -> dict[str, Any]:
        return await self._probe("/api/health/ready")

    async def live(self) -> dict[str, Any]:
        return await self._probe("/api/health/live")

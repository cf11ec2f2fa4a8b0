"""Identidad: usuarios, roles, tenants y sesión.

Por qué separado del resto de DTOs:
- Es lo único que el cliente necesita *interpretar* (permisos, tipo de usuario,
  expiración del token); el resto de modelos solo se transportan.

Reglas:
- `user_type` y los estados se tipan como `str` en los DTO: el backend añade
  valores nuevos sin avisar. Los enums sirven para comparar, no para validar.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import Field, model_validator

from core.domain.common import ApiModel, ListFilters


class UserType(str, Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    SUPPORT = "SUPPORT"
    SELLER = "SELLER"
    LIVREUR = "LIVREUR"
    CUSTOMER = "CUSTOMER"
    BUYER = "BUYER"
    VENDOR = "VENDOR"
    WAREHOUSE = "WAREHOUSE"
    DISPATCHER = "DISPATCHER"
    EMPLOYEE = "EMPLOYEE"
    CLIENT = "CLIENT"
    USER = "USER"


class AccountStatus(str, Enum):
    PENDING = "PENDING"
    INACTIVE = "INACTIVE"
    PENDING_VALIDATION = "PENDING_VALIDATION"
    ACTIVE = "ACTIVE"
    REJECTED = "REJECTED"
    SUSPENDED = "SUSPENDED"


class ValidationStatus(str, Enum):
    PENDING = "PENDING"
    VALIDATED = "VALIDATED"
    REJECTED = "REJECTED"


class AccessLevel(str, Enum):
    NO_ACCESS = "NO_ACCESS"
    PROFILE_ONLY = "PROFILE_ONLY"
    LIMITED = "LIMITED"
    FULL = "FULL"


class TenantRef(ApiModel):
    id: str
    name: str | None = None
    slug: str | None = None


class Tenant(ApiModel):
    id: str
    name: str
    slug: str | None = None
    domain: str | None = None
    logo: str | None = None
    settings: dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True
    stats: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TenantStats(ApiModel):
    total_users: int = 0
    active_users: int = 0
    new_users_this_month: int = 0
    total_roles: int = 0
    total_parcels: int = 0
    parcels_this_month: int = 0
    total_invoices: int = 0
    invoices_this_month: int = 0
    total_claims: int = 0
    claims_this_month: int = 0
    recent_activity: Any = None
    trends: Any = None


class CreateTenantRequest(ApiModel):
    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    domain: str | None = None
    logo: str | None = None
    settings: dict[str, Any] | None = None
    is_active: bool | None = None


class UpdateTenantRequest(ApiModel):
    name: str | None = None
    slug: str | None = None
    domain: str | None = None
    logo: str | None = None
    settings: dict[str, Any] | None = None
    is_active: bool | None = None


class TenantFilters(ListFilters):
    name: str | None = None
    slug: str | None = None
    is_active: bool | None = None


class RoleRef(ApiModel):
    id: str | None = None
    name: str
    permissions: list[str] = Field(default_factory=list)
    user_types: list[str] = Field(default_factory=list)


class Role(ApiModel):
    id: str
    name: str
    description: str | None = None
    permissions: list[str] = Field(default_factory=list)
    user_types: list[str] = Field(default_factory=list)
    tenant_id: str | None = None
    is_active: bool = True
    user_count: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CreateRoleRequest(ApiModel):
    name: str = Field(..., min_length=1)
    description: str | None = None
    permissions: list[str] = Field(default_factory=list)
    user_types: list[str] = Field(default_factory=list)
    is_active: bool | None = None


class UpdateRoleRequest(ApiModel):
    name: str | None = None
    description: str | None = None
    permissions: list[str] | None = None
    user_types: list[str] | None = None
    is_active: bool | None = None


class RoleFilters(ListFilters):
    is_active: bool | None = None
    user_type: str | None = None


class AvailablePermissions(ApiModel):
    """Catálogo de permisos del backend, agrupado por módulo."""

    permissions: list[str] = Field(default_factory=list)
    grouped: dict[str, list[str]] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_list(cls, data: Any) -> Any:
        if isinstance(data, list):
            return {"permissions": data}
        return data


class User(ApiModel):
    id: str
    email: str
    name: str | None = None
    user_type: str | None = None
    avatar: str | None = None
    phone: str | None = None
    city: str | None = None
    profile: dict[str, Any] | None = None
    account_status: str | None = None
    validation_status: str | None = None
    profile_completed: bool | None = None
    is_active: bool = True
    role_id: str | None = None
    role: RoleRef | None = None
    tenant_id: str | None = None
    tenant: TenantRef | None = None
    permissions: list[str] = Field(default_factory=list)
    last_login: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def role_name(self) -> str | None:
        return self.role.name if self.role else None

    @property
    def effective_tenant_id(self) -> str | None:
        if self.tenant_id:
            return self.tenant_id
        return self.tenant.id if self.tenant else None


class CreateUserRequest(ApiModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    name: str | None = None
    user_type: str
    role_id: str
    profile: dict[str, Any] | None = None


class UpdateUserRequest(ApiModel):
    name: str | None = None
    role_id: str | None = None
    profile: dict[str, Any] | None = None
    is_active: bool | None = None


class UserFilters(ListFilters):
    user_type: str | None = None
    role_id: str | None = None
    is_active: bool | None = None
    account_status: str | None = None


class UserPermissions(ApiModel):
    user_id: str
    email: str | None = None
    user_type: str | None = None
    account_status: str | None = None
    validation_status: str | None = None
    role: RoleRef | None = None
    permissions: list[str] = Field(default_factory=list)
    is_active: bool = True


class UserStatistics(ApiModel):
    total: int = 0
    active: int = 0
    inactive: int = 0
    pending: int = 0
    pending_validation: int = 0
    suspended: int = 0
    rejected: int = 0
    validated: int = 0
    by_user_type: dict[str, int] = Field(default_factory=dict)
    recent_registrations: int = 0
    pending_actions: int = 0


class UserActivity(ApiModel):
    id: str
    action: str
    timestamp: datetime | None = None
    performed_by: dict[str, Any] | None = None
    details: Any = None


class LoginRequest(ApiModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class RegisterRequest(ApiModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    name: str | None = None
    role_id: str | None = None
    profile: dict[str, Any] | None = None


class CompleteProfileRequest(ApiModel):
    address: str = Field(..., min_length=1)
    cin: str = Field(..., min_length=1)
    phone: str | None = None
    city: str | None = None
    cin_documents: list[str] | None = None
    bank_details: Any = None
    profile_photo: str | None = None


class LoginResponse(ApiModel):
    """Respuesta de `/api/auth/login`.

    El backend ha usado `accessToken` y `token` para lo mismo; aceptamos ambos.
    """

    user: User | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    token_type: str | None = None
    expires_in: int | None = None
    message: str | None = None

    account_status: str | None = None
    requires_approval: bool | None = None
    requires_profile_completion: bool | None = None
    profile_access: bool | None = None
    limited_access: bool | None = None
    full_access: bool | None = None
    pending_validation: bool | None = None
    access_denied: bool | None = None
    validation_status: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _token_alias(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("accessToken") and data.get("token"):
            data = {**data, "accessToken": data["token"]}
        return data


class RegisterResponse(ApiModel):
    success: bool = True
    message: str | None = None
    account_status: str | None = None
    user: User | None = None
    next_steps: list[str] = Field(default_factory=list)
    estimated_approval_time: str | None = None


class AccountStatusResponse(ApiModel):
    account_status: str
    validation_status: str | None = None
    profile_completed: bool = False
    access_level: str = AccessLevel.NO_ACCESS.value
    requirements: list[str] = Field(default_factory=list)
    has_blue_checkmark: bool = False
    status_message: str | None = None
    next_action: str | None = None
    estimated_wait_time: str | None = None


class TokenPair(ApiModel):
    access_token: str
    refresh_token: str | None = None
    expires_in: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _token_alias(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("accessToken") and data.get("token"):
            data = {**data, "accessToken": data["token"]}
        return data


class Session(ApiModel):
    """Sesión persistida en el cliente (sustituye a localStorage/cookies)."""

    access_token: str
    refresh_token: str | None = None
    expires_at: datetime | None = None
    user: User | None = None
    permissions: list[str] = Field(default_factory=list)
    tenant_id: str | None = None

    def seconds_left(self, now: datetime | None = None) -> float | None:
        if self.expires_at is None:
            return None
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return (expires_at - now).total_seconds()

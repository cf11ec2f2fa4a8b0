"""Permisos y principal autenticado.

Responsabilidad:
- Catálogo de claves de permiso que usa el backend (`recurso:acción`).
- `Principal`: quién es el usuario a efectos de autorización (permisos, rol,
  tipo de usuario, tenant). Es inmutable y no sabe de HTTP ni de tokens.

Reglas:
- `*` o `super_admin` en el set de permisos equivalen a tener cualquier permiso.
- Una lista de requisitos vacía no exige nada.
- Los nombres de rol se comparan sin distinguir mayúsculas.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from core.domain.identity import User

WILDCARD_PERMISSIONS = frozenset({"*", "super_admin"})

# Usuarios y roles
USERS_READ = "users:read"
USERS_CREATE = "users:create"
USERS_UPDATE = "users:update"
USERS_DELETE = "users:delete"
USERS_MANAGE_ROLES = "users:manage_roles"
USERS_ANALYTICS = "users:analytics"
ROLES_READ = "roles:read"
ROLES_CREATE = "roles:create"
ROLES_UPDATE = "roles:update"
ROLES_DELETE = "roles:delete"
ROLES_ASSIGN = "roles:assign"
ADMIN_FULL_ACCESS = "admin:full_access"
ADMIN_SYSTEM_SETTINGS = "admin:system_settings"
ADMIN_TENANT_MANAGEMENT = "admin:tenant_management"

# Colis y bordereaux
PARCELS_READ = "parcels:read"
PARCELS_CREATE = "parcels:create"
PARCELS_UPDATE = "parcels:update"
PARCELS_DELETE = "parcels:delete"
PARCEL_STATUSES_READ = "parcel_statuses:read"
PARCEL_STATUSES_CREATE = "parcel_statuses:create"
PARCEL_STATUSES_UPDATE = "parcel_statuses:update"
PARCEL_STATUSES_DELETE = "parcel_statuses:delete"
SHIPPING_SLIPS_READ = "shipping_slips:read"
SHIPPING_SLIPS_CREATE = "shipping_slips:create"
SHIPPING_SLIPS_UPDATE = "shipping_slips:update"
SHIPPING_SLIPS_DELETE = "shipping_slips:delete"
DELIVERY_SLIPS_READ = "delivery_slips:read"
DELIVERY_SLIPS_CREATE = "delivery_slips:create"
DELIVERY_SLIPS_UPDATE = "delivery_slips:update"
DELIVERY_SLIPS_DELETE = "delivery_slips:delete"

# Configuración
SETTINGS_READ = "settings:read"
CITIES_READ = "cities:read"
CITIES_CREATE = "cities:create"
PICKUP_CITIES_READ = "pickup-cities:read"
PICKUP_CITIES_CREATE = "pickup-cities:create"
TARIFFS_READ = "tariffs:read"
TARIFFS_CREATE = "tariffs:create"
ZONES_READ = "zones:read"
ZONES_CREATE = "zones:create"
OPTIONS_READ = "options:read"
OPTIONS_PARCEL_STATUSES_READ = "options:parcel_statuses:read"
OPTIONS_CLIENT_TYPES_READ = "options:client_types:read"
OPTIONS_BANKS_READ = "options:banks:read"
SMS_SETTINGS_READ = "sms-settings:read"
EMAIL_SETTINGS_READ = "email-settings:read"

# Pagos
PAYMENTS_READ = "payments:read"
PAYMENTS_CREATE = "payments:create"
PAYMENTS_UPDATE = "payments:update"
PAYMENTS_DELETE = "payments:delete"
PAYMENTS_EXPORT = "payments:export"
PAYMENTS_SEND = "payments:send"
PAYMENTS_BULK_OPERATIONS = "payments:bulk_operations"

# Inventario
PRODUCTS_READ = "products:read"
WAREHOUSES_READ = "warehouses:read"
EXPEDITIONS_READ = "expeditions:read"

PERMISSION_GROUPS: dict[str, tuple[str, ...]] = {
    "USER_MANAGEMENT": (USERS_READ, USERS_CREATE, USERS_UPDATE, USERS_DELETE, USERS_MANAGE_ROLES, USERS_ANALYTICS),
    "ROLE_MANAGEMENT": (ROLES_READ, ROLES_CREATE, ROLES_UPDATE, ROLES_DELETE, ROLES_ASSIGN),
    "ADMIN_ONLY": (ADMIN_FULL_ACCESS, ADMIN_SYSTEM_SETTINGS, ADMIN_TENANT_MANAGEMENT),
    "PARCELS": (PARCELS_READ, PARCELS_CREATE, PARCELS_UPDATE, PARCELS_DELETE),
    "PAYMENTS": (
        PAYMENTS_READ,
        PAYMENTS_CREATE,
        PAYMENTS_UPDATE,
        PAYMENTS_DELETE,
        PAYMENTS_EXPORT,
        PAYMENTS_SEND,
        PAYMENTS_BULK_OPERATIONS,
    ),
}


def _role_name(raw: Any) -> str | None:
    if isinstance(raw, str):
        return raw or None
    if isinstance(raw, Mapping):
        name = raw.get("name")
        return str(name) if name else None
    return None


@dataclass(frozen=True)
class Principal:
    """Identidad autorizable derivada del token o del usuario autenticado."""

    user_id: str | None = None
    email: str | None = None
    name: str | None = None
    user_type: str | None = None
    role_name: str | None = None
    tenant_id: str | None = None
    permissions: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None

    def has_permission(self, permission: str) -> bool:
        if not self.permissions:
            return False
        if self.permissions & WILDCARD_PERMISSIONS:
            return True
        return permission in self.permissions

    def has_any_permission(self, permissions: Iterable[str]) -> bool:
        required = list(permissions)
        if not required:
            return True
        return any(self.has_permission(p) for p in required)

    def has_all_permissions(self, permissions: Iterable[str]) -> bool:
        return all(self.has_permission(p) for p in permissions)

    def has_role(self, role_name: str) -> bool:
        if not self.role_name:
            return False
        return self.role_name.casefold() == role_name.casefold()

    def has_any_role(self, role_names: Iterable[str]) -> bool:
        required = list(role_names)
        if not required:
            return True
        return any(self.has_role(r) for r in required)

    def has_user_type(self, user_types: Iterable[str]) -> bool:
        required = list(user_types)
        if not required:
            return True
        if not self.user_type:
            return False
        return self.user_type in required

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> "Principal":
        """Construye el principal a partir de los claims de un JWT."""

        raw_permissions = claims.get("permissions") or []
        role = claims.get("role")
        if not raw_permissions and isinstance(role, Mapping):
            raw_permissions = role.get("permissions") or []
        return cls(
            user_id=claims.get("sub") or claims.get("userId"),
            email=claims.get("email"),
            name=claims.get("name"),
            user_type=claims.get("userType"),
            role_name=_role_name(role),
            tenant_id=claims.get("tenantId"),
            permissions=frozenset(str(p) for p in raw_permissions),
        )

    @classmethod
    def from_user(cls, user: User, permissions: Iterable[str] | None = None) -> "Principal":
        """Construye el principal desde el usuario devuelto por login/profile.

        Si no se pasan permisos explícitos se usan los del usuario o los de su rol.
        """

        if permissions is None:
            permissions = user.permissions or (user.role.permissions if user.role else [])
        return cls(
            user_id=user.id,
            email=user.email,
            name=user.name,
            user_type=user.user_type,
            role_name=user.role_name,
            tenant_id=user.effective_tenant_id,
            permissions=frozenset(permissions),
        )


ANONYMOUS = Principal()

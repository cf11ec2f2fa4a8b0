"""Navegación filtrada por permisos.

Responsabilidad:
- El menú del back-office es un árbol estático. Cada nodo puede exigir
  permisos, roles y tipos de usuario (basta con uno de cada lista); aquí se
  filtra el árbol para un `Principal` y se marcan las entradas de la ruta
  actual.

Reglas:
- Un principal anónimo no ve nada.
- Un nodo sin requisitos es visible para cualquier principal autenticado.
- Un padre cuyos hijos se filtraron todos desaparece; un nodo declarado con
  `children` vacío es una hoja y se queda.
- Filtrar y marcar devuelven objetos nuevos; el catálogo nunca se muta.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Sequence

from core.domain import permissions as perm
from core.domain.identity import UserType
from core.domain.permissions import Principal


@dataclass(frozen=True)
class NavItem:
    id: str
    label: str
    href: str
    icon: str | None = None
    permissions: tuple[str, ...] = ()
    roles: tuple[str, ...] = ()
    user_types: tuple[str, ...] = ()
    badge: str | int | None = None
    children: tuple["NavItem", ...] | None = None
    active: bool = False

    @property
    def has_children(self) -> bool:
        return bool(self.children)


@dataclass(frozen=True)
class NavGroup:
    id: str
    label: str
    items: tuple[NavItem, ...] = ()
    permissions: tuple[str, ...] = ()
    user_types: tuple[str, ...] = ()
    roles: tuple[str, ...] = ()


@dataclass
class NavigationView:
    """Resultado listo para pintar: grupos visibles + rutas accesibles."""

    groups: list[NavGroup] = field(default_factory=list)
    paths: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.groups


def can_see(node: NavItem | NavGroup, principal: Principal) -> bool:
    if principal.is_anonymous:
        return False
    return (
        principal.has_any_permission(node.permissions)
        and principal.has_any_role(node.roles)
        and principal.has_user_type(node.user_types)
    )


def filter_items(items: Iterable[NavItem], principal: Principal) -> list[NavItem]:
    visible: list[NavItem] = []
    for item in items:
        if not can_see(item, principal):
            continue
        if item.children:
            children = filter_items(item.children, principal)
            if not children:
                continue
            item = replace(item, children=tuple(children))
        visible.append(item)
    return visible


def filter_menu(groups: Iterable[NavGroup], principal: Principal) -> list[NavGroup]:
    visible: list[NavGroup] = []
    for group in groups:
        if not can_see(group, principal):
            continue
        items = filter_items(group.items, principal)
        if items:
            visible.append(replace(group, items=tuple(items)))
    return visible


def _path_matches(href: str, pathname: str, *, prefix: bool) -> bool:
    if pathname == href:
        return True
    if not prefix or href == "/":
        return False
    return pathname.startswith(href.rstrip("/") + "/")


def _mark_item(item: NavItem, pathname: str) -> NavItem:
    if item.children:
        children = tuple(_mark_item(child, pathname) for child in item.children)
        active = _path_matches(item.href, pathname, prefix=True) or any(c.active for c in children)
        return replace(item, children=children, active=active)
    return replace(item, active=_path_matches(item.href, pathname, prefix=False))


def mark_active(groups: Iterable[NavGroup], pathname: str) -> list[NavGroup]:
    """Marca `active` (exacto en hojas, por prefijo en padres)."""

    return [replace(g, items=tuple(_mark_item(i, pathname) for i in g.items)) for g in groups]


def flatten(groups: Iterable[NavGroup]) -> list[tuple[int, NavItem]]:
    out: list[tuple[int, NavItem]] = []

    def walk(items: Sequence[NavItem], depth: int) -> None:
        for item in items:
            out.append((depth, item))
            if item.children:
                walk(item.children, depth + 1)

    for group in groups:
        walk(group.items, 0)
    return out


def accessible_paths(groups: Iterable[NavGroup]) -> list[str]:
    seen: dict[str, None] = {}
    for _, item in flatten(groups):
        if item.href:
            seen.setdefault(item.href, None)
    return list(seen)


def build_navigation(
    principal: Principal,
    pathname: str | None = None,
    groups: Sequence[NavGroup] | None = None,
) -> NavigationView:
    visible = filter_menu(SIDEBAR_MENU if groups is None else groups, principal)
    if pathname:
        visible = mark_active(visible, pathname)
    return NavigationView(groups=visible, paths=accessible_paths(visible))


# --------------------------------------------------------------------------- #
# Catálogo
# --------------------------------------------------------------------------- #


def _leaf(href: str, label: str, *permissions: str, item_id: str | None = None, icon: str | None = None) -> NavItem:
    return NavItem(
        id=item_id or href.strip("/").replace("/", "-") or "home",
        label=label,
        href=href,
        icon=icon,
        permissions=tuple(permissions),
    )


_ADMIN_OR_MANAGER = (UserType.ADMIN.value, UserType.MANAGER.value)

SIDEBAR_MENU: tuple[NavGroup, ...] = (
    NavGroup(
        id="dashboard",
        label="Dashboard",
        user_types=_ADMIN_OR_MANAGER,
        items=(
            NavItem(
                id="dashboard",
                label="Dashboard",
                href="/",
                icon="heroicons-outline:home",
                user_types=_ADMIN_OR_MANAGER,
            ),
        ),
    ),
    NavGroup(
        id="parcels",
        label="Parcels",
        permissions=(perm.PARCELS_READ,),
        items=(
            NavItem(
                id="parcels",
                label="Parcels",
                href="/parcels",
                icon="heroicons-outline:cube",
                permissions=(perm.PARCELS_READ,),
                children=(
                    _leaf("/parcels", "All parcels", perm.PARCELS_READ, item_id="parcels-list"),
                    _leaf("/parcels/create", "Create parcel", perm.PARCELS_CREATE),
                ),
            ),
        ),
    ),
    NavGroup(
        id="slips",
        label="Slips",
        permissions=(perm.SHIPPING_SLIPS_READ, perm.DELIVERY_SLIPS_READ),
        items=(
            NavItem(
                id="delivery-slips",
                label="Delivery slips",
                href="/delivery-slips",
                icon="heroicons-outline:inbox-in",
                permissions=(perm.DELIVERY_SLIPS_READ,),
                children=(
                    _leaf("/delivery-slips", "All delivery slips", perm.DELIVERY_SLIPS_READ, item_id="delivery-slips-list"),
                    _leaf("/delivery-slips/create", "Create delivery slip", perm.DELIVERY_SLIPS_CREATE),
                    _leaf("/delivery-slips/scan", "Scan", perm.DELIVERY_SLIPS_UPDATE),
                    _leaf("/delivery-slips/statistics", "Statistics", perm.DELIVERY_SLIPS_READ),
                ),
            ),
            NavItem(
                id="shipping-slips",
                label="Shipping slips",
                href="/shipping-slips",
                icon="heroicons-outline:truck",
                permissions=(perm.SHIPPING_SLIPS_READ,),
                children=(
                    _leaf("/shipping-slips", "All shipping slips", perm.SHIPPING_SLIPS_READ, item_id="shipping-slips-list"),
                    _leaf("/shipping-slips/create", "Create shipping slip", perm.SHIPPING_SLIPS_CREATE),
                ),
            ),
        ),
    ),
    NavGroup(
        id="payments",
        label="Payments",
        permissions=(perm.PAYMENTS_READ,),
        items=(
            NavItem(
                id="factures",
                label="Invoices",
                href="/payments",
                icon="heroicons-outline:document-text",
                permissions=(perm.PAYMENTS_READ,),
                children=(
                    _leaf("/payments", "All invoices", perm.PAYMENTS_READ, item_id="factures-list"),
                    _leaf("/payments/create", "Create invoice", perm.PAYMENTS_CREATE),
                ),
            ),
            NavItem(
                id="bons-livreurs",
                label="Courier vouchers",
                href="/payments/bons/livreurs",
                icon="heroicons-outline:cash",
                permissions=(perm.PAYMENTS_READ,),
                children=(
                    _leaf("/payments/bons/livreurs", "All vouchers", perm.PAYMENTS_READ, item_id="bons-livreurs-list"),
                    _leaf("/payments/bons/livreurs/create", "Create voucher", perm.PAYMENTS_CREATE),
                    _leaf("/payments/bons/livreurs/livreurs-summary", "Couriers summary", perm.PAYMENTS_READ),
                    _leaf("/payments/bons/livreurs/zones-summary", "Zones summary", perm.PAYMENTS_READ),
                ),
            ),
            NavItem(
                id="bons-zones",
                label="Zone vouchers",
                href="/payments/bons/zones",
                icon="heroicons-outline:map",
                permissions=(perm.PAYMENTS_READ,),
                children=(
                    _leaf("/payments/bons/zones", "All zone vouchers", perm.PAYMENTS_READ, item_id="bons-zones-list"),
                    _leaf("/payments/bons/zones/create", "Create zone voucher", perm.PAYMENTS_CREATE),
                    _leaf("/payments/bons/zones/summary", "Summary", perm.PAYMENTS_READ),
                ),
            ),
        ),
    ),
    NavGroup(
        id="inventory",
        label="Inventory",
        permissions=(perm.PRODUCTS_READ, perm.WAREHOUSES_READ, perm.EXPEDITIONS_READ),
        items=(
            _leaf("/products", "Products", perm.PRODUCTS_READ, icon="heroicons-outline:shopping-bag"),
            _leaf("/warehouses", "Warehouses", perm.WAREHOUSES_READ, icon="heroicons-outline:office-building"),
            NavItem(
                id="expeditions",
                label="Expeditions",
                href="/expeditions",
                icon="heroicons-outline:paper-airplane",
                permissions=(perm.EXPEDITIONS_READ,),
                children=(
                    _leaf("/expeditions", "All expeditions", perm.EXPEDITIONS_READ, item_id="expeditions-list"),
                    _leaf("/expeditions/new", "New expedition", perm.EXPEDITIONS_READ),
                ),
            ),
        ),
    ),
    NavGroup(
        id="users",
        label="Users",
        permissions=(perm.USERS_READ,),
        items=(
            NavItem(
                id="users",
                label="Users",
                href="/users",
                icon="heroicons-outline:users",
                permissions=(perm.USERS_READ,),
                children=(
                    _leaf("/users", "Users", perm.USERS_READ, item_id="users-list"),
                    _leaf("/users/create", "Create user", perm.USERS_CREATE),
                ),
            ),
        ),
    ),
    NavGroup(
        id="roles",
        label="Roles",
        permissions=(perm.ROLES_READ,),
        items=(
            NavItem(
                id="roles",
                label="Roles",
                href="/roles",
                icon="heroicons-outline:identification",
                permissions=(perm.ROLES_READ,),
                children=(
                    _leaf("/roles", "Roles", perm.ROLES_READ, item_id="roles-list"),
                    _leaf("/roles/create", "Create role", perm.ROLES_CREATE),
                    _leaf("/roles/permissions", "Permissions", perm.ROLES_READ),
                ),
            ),
        ),
    ),
    NavGroup(
        id="settings",
        label="Settings",
        permissions=(perm.SETTINGS_READ,),
        items=(
            NavItem(
                id="settings",
                label="Settings",
                href="/settings",
                icon="heroicons-outline:cog",
                permissions=(perm.SETTINGS_READ,),
                children=(
                    _leaf("/settings", "Settings dashboard", perm.SETTINGS_READ, item_id="settings-dashboard"),
                    _leaf("/settings/general", "General settings", perm.SETTINGS_READ),
                    NavItem(
                        id="settings-cities",
                        label="Cities",
                        href="/settings/cities",
                        icon="heroicons-outline:location-marker",
                        permissions=(perm.CITIES_READ,),
                        children=(
                            _leaf("/settings/cities", "Cities list", perm.CITIES_READ, item_id="settings-cities-list"),
                            _leaf("/settings/cities/create", "Create city", perm.CITIES_CREATE),
                        ),
                    ),
                    NavItem(
                        id="settings-pickup-cities",
                        label="Pickup cities",
                        href="/settings/pickup-cities",
                        icon="heroicons-outline:map",
                        permissions=(perm.PICKUP_CITIES_READ,),
                        children=(
                            _leaf(
                                "/settings/pickup-cities",
                                "Pickup cities list",
                                perm.PICKUP_CITIES_READ,
                                item_id="settings-pickup-cities-list",
                            ),
                            _leaf("/settings/pickup-cities/create", "Create pickup city", perm.PICKUP_CITIES_CREATE),
                        ),
                    ),
                    NavItem(
                        id="settings-tariffs",
                        label="Tariffs",
                        href="/settings/tariffs",
                        icon="heroicons-outline:currency-dollar",
                        permissions=(perm.TARIFFS_READ,),
                        children=(
                            _leaf("/settings/tariffs", "Tariffs list", perm.TARIFFS_READ, item_id="settings-tariffs-list"),
                            _leaf("/settings/tariffs/create", "Create tariff", perm.TARIFFS_CREATE),
                            _leaf("/settings/tariffs/bulk-import", "Bulk import tariffs", perm.TARIFFS_CREATE),
                        ),
                    ),
                    NavItem(
                        id="settings-zones",
                        label="Zones",
                        href="/settings/zones",
                        icon="heroicons-outline:globe",
                        permissions=(perm.ZONES_READ,),
                        children=(
                            _leaf("/settings/zones", "Zones list", perm.ZONES_READ, item_id="settings-zones-list"),
                            _leaf("/settings/zones/create", "Create zone", perm.ZONES_CREATE),
                        ),
                    ),
                    NavItem(
                        id="settings-options",
                        label="Options",
                        href="/settings/options",
                        icon="heroicons-outline:menu",
                        permissions=(perm.OPTIONS_READ,),
                        children=(
                            _leaf("/settings/options", "Options overview", perm.OPTIONS_READ, item_id="settings-options-overview"),
                            _leaf(
                                "/settings/options/parcel-statuses",
                                "Parcel statuses",
                                perm.OPTIONS_PARCEL_STATUSES_READ,
                            ),
                            _leaf("/settings/options/client-types", "Client types", perm.OPTIONS_CLIENT_TYPES_READ),
                            _leaf("/settings/options/banks", "Banks", perm.OPTIONS_BANKS_READ),
                        ),
                    ),
                    NavItem(
                        id="settings-sms",
                        label="SMS settings",
                        href="/settings/sms",
                        icon="heroicons-outline:chat",
                        permissions=(perm.SMS_SETTINGS_READ,),
                        children=(
                            _leaf("/settings/sms", "SMS configuration", perm.SMS_SETTINGS_READ, item_id="settings-sms-configuration"),
                            _leaf("/settings/sms/templates", "SMS templates", perm.SMS_SETTINGS_READ),
                        ),
                    ),
                    NavItem(
                        id="settings-email",
                        label="Email settings",
                        href="/settings/email",
                        icon="heroicons-outline:mail",
                        permissions=(perm.EMAIL_SETTINGS_READ,),
                        children=(
                            _leaf(
                                "/settings/email",
                                "Email configuration",
                                perm.EMAIL_SETTINGS_READ,
                                item_id="settings-email-configuration",
                            ),
                            _leaf("/settings/email/templates", "Email templates", perm.EMAIL_SETTINGS_READ),
                        ),
                    ),
                ),
            ),
        ),
    ),
)


# Árbol del área de administración: permisos con punto y restricciones de rol.
ADMIN_NAVIGATION: tuple[NavItem, ...] = (
    NavItem(id="dashboard", label="Dashboard", href="/dashboard", icon="heroicons:home", permissions=("dashboard.view",)),
    NavItem(
        id="analytics",
        label="Analytics",
        href="/dashboard/analytics",
        icon="heroicons:chart-bar",
        permissions=("analytics.view",),
    ),
    NavItem(
        id="parcels",
        label="Parcels",
        href="/dashboard/parcels",
        icon="heroicons:cube",
        permissions=("parcels.view",),
        children=(
            NavItem(id="parcels-list", label="All Parcels", href="/dashboard/parcels", permissions=("parcels.view",)),
            NavItem(
                id="parcels-create",
                label="Create Parcel",
                href="/dashboard/parcels/create",
                permissions=("parcels.create",),
            ),
            NavItem(
                id="parcels-track",
                label="Track Parcels",
                href="/dashboard/parcels/track",
                permissions=("parcels.track",),
            ),
        ),
    ),
    NavItem(
        id="merchants",
        label="Merchants",
        href="/dashboard/merchants",
        icon="heroicons:building-storefront",
        permissions=("merchants.view",),
        children=(
            NavItem(
                id="merchants-list",
                label="All Merchants",
                href="/dashboard/merchants",
                permissions=("merchants.view",),
            ),
            NavItem(
                id="merchants-create",
                label="Add Merchant",
                href="/dashboard/merchants/create",
                permissions=("merchants.create",),
            ),
        ),
    ),
    NavItem(
        id="delivery-agents",
        label="Delivery Agents",
        href="/dashboard/delivery-agents",
        icon="heroicons:truck",
        permissions=("delivery_agents.view",),
        roles=("admin", "manager"),
    ),
    NavItem(
        id="invoices",
        label="Invoices",
        href="/dashboard/invoices",
        icon="heroicons:document-text",
        permissions=("invoices.view",),
        children=(
            NavItem(id="invoices-list", label="All Invoices", href="/dashboard/invoices", permissions=("invoices.view",)),
            NavItem(
                id="invoices-pending",
                label="Pending",
                href="/dashboard/invoices/pending",
                permissions=("invoices.view",),
                badge="pending",
            ),
            NavItem(
                id="invoices-overdue",
                label="Overdue",
                href="/dashboard/invoices/overdue",
                permissions=("invoices.view",),
                badge="overdue",
            ),
        ),
    ),
    NavItem(
        id="claims",
        label="Claims",
        href="/dashboard/claims",
        icon="heroicons:exclamation-triangle",
        permissions=("claims.view",),
    ),
    NavItem(
        id="reports",
        label="Reports",
        href="/dashboard/reports",
        icon="heroicons:document-chart-bar",
        permissions=("reports.view",),
        roles=("admin", "manager"),
    ),
    NavItem(
        id="settings",
        label="Settings",
        href="/dashboard/settings",
        icon="heroicons:cog-6-tooth",
        permissions=("settings.view",),
        children=(
            NavItem(
                id="settings-general",
                label="General",
                href="/dashboard/settings/general",
                permissions=("settings.view",),
            ),
            NavItem(
                id="settings-profile",
                label="Profile",
                href="/dashboard/settings/profile",
                permissions=("profile.edit",),
            ),
            NavItem(
                id="settings-notifications",
                label="Notifications",
                href="/dashboard/settings/notifications",
                permissions=("settings.notifications",),
            ),
            NavItem(
                id="settings-security",
                label="Security",
                href="/dashboard/settings/security",
                permissions=("settings.security",),
            ),
        ),
    ),
    NavItem(
        id="admin",
        label="Administration",
        href="/admin",
        icon="heroicons:shield-check",
        permissions=("admin.access",),
        roles=("admin",),
        children=(
            NavItem(id="admin-users", label="Users", href="/admin/users", permissions=("users.manage",)),
            NavItem(id="admin-tenants", label="Tenants", href="/admin/tenants", permissions=("tenants.manage",)),
            NavItem(id="admin-system", label="System Settings", href="/admin/system", permissions=("system.manage",)),
        ),
    ),
)

ADMIN_MENU: tuple[NavGroup, ...] = (NavGroup(id="admin-area", label="Administration", items=ADMIN_NAVIGATION),)

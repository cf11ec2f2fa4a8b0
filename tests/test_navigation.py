from __future__ import annotations

from core.domain import permissions as perm
from core.domain.permissions import ANONYMOUS, Principal
from core.services.navigation import (
    ADMIN_MENU,
    SIDEBAR_MENU,
    NavGroup,
    NavItem,
    accessible_paths,
    build_navigation,
    filter_menu,
    flatten,
    mark_active,
)


def _principal(*permissions: str, user_type: str = "SELLER", role: str | None = None) -> Principal:
    return Principal(
        user_id="u1",
        user_type=user_type,
        role_name=role,
        permissions=frozenset(permissions),
    )


def _find(items, item_id):
    for item in items:
        if item.id == item_id:
            return item
    raise AssertionError(f"{item_id} not visible")


def test_parcels_reader_only_sees_parcels_group():
    view = build_navigation(_principal(perm.PARCELS_READ))

    assert [g.id for g in view.groups] == ["parcels"]
    parcels = view.groups[0].items[0]
    assert [c.href for c in parcels.children] == ["/parcels"]
    assert "/parcels/create" not in view.paths


def test_anonymous_sees_nothing():
    view = build_navigation(ANONYMOUS)

    assert view.is_empty
    assert view.paths == []


def test_dashboard_is_gated_by_user_type():
    seller = build_navigation(_principal(perm.PARCELS_READ, user_type="SELLER"))
    manager = build_navigation(_principal(perm.PARCELS_READ, user_type="MANAGER"))

    assert "dashboard" not in [g.id for g in seller.groups]
    assert [g.id for g in manager.groups][0] == "dashboard"


def test_wildcard_admin_sees_every_group():
    view = build_navigation(_principal("*", user_type="ADMIN"))

    assert [g.id for g in view.groups] == [g.id for g in SIDEBAR_MENU]
    assert "/settings/sms/templates" in view.paths


def test_items_without_requirements_are_visible():
    menu = (NavGroup(id="g", label="G", items=(NavItem(id="help", label="Help", href="/help"),)),)

    visible = filter_menu(menu, _principal())

    assert [i.id for i in visible[0].items] == ["help"]


def test_parent_disappears_when_all_children_are_filtered():
    menu = (
        NavGroup(
            id="g",
            label="G",
            items=(
                NavItem(
                    id="parent",
                    label="Parent",
                    href="/p",
                    children=(NavItem(id="child", label="Child", href="/p/c", permissions=("secret:read",)),),
                ),
                NavItem(id="leaf", label="Leaf", href="/leaf", children=()),
            ),
        ),
    )

    visible = filter_menu(menu, _principal("other:read"))

    assert [i.id for i in visible[0].items] == ["leaf"]


def test_admin_area_requires_admin_role_case_insensitive():
    granted = ("admin.access", "users.manage", "dashboard.view")

    as_admin = build_navigation(_principal(*granted, role="Admin"), groups=ADMIN_MENU)
    as_seller = build_navigation(_principal(*granted, role="seller"), groups=ADMIN_MENU)

    admin_item = _find(as_admin.groups[0].items, "admin")
    assert [c.id for c in admin_item.children] == ["admin-users"]
    assert "/admin" not in as_seller.paths
    assert "/dashboard" in as_seller.paths


def test_admin_parent_dropped_without_any_child_permission():
    view = build_navigation(_principal("admin.access", "dashboard.view", role="admin"), groups=ADMIN_MENU)

    assert "/admin" not in view.paths


def test_role_restricted_leaf():
    reports_perm = _principal("reports.view", role="viewer")
    reports_manager = _principal("reports.view", role="MANAGER")

    assert build_navigation(reports_perm, groups=ADMIN_MENU).is_empty
    assert build_navigation(reports_manager, groups=ADMIN_MENU).paths == ["/dashboard/reports"]


def test_mark_active_exact_on_leaves_prefix_on_parents():
    view = build_navigation(_principal(perm.PARCELS_READ, perm.PARCELS_CREATE), "/parcels/create")

    parcels = view.groups[0].items[0]
    assert parcels.active
    by_href = {c.href: c.active for c in parcels.children}
    assert by_href == {"/parcels": False, "/parcels/create": True}


def test_mark_active_parent_prefix_on_unlisted_subpath():
    groups = filter_menu(SIDEBAR_MENU, _principal(perm.PARCELS_READ))

    marked = mark_active(groups, "/parcels/123/edit")

    assert marked[0].items[0].active
    assert not any(c.active for c in marked[0].items[0].children)


def test_root_href_never_matches_by_prefix():
    manager = _principal(user_type="MANAGER")

    marked = mark_active(filter_menu(SIDEBAR_MENU, manager), "/parcels")
    home = mark_active(filter_menu(SIDEBAR_MENU, manager), "/")

    assert not marked[0].items[0].active
    assert home[0].items[0].active


def test_flatten_depths_and_paths_are_unique():
    view = build_navigation(_principal(perm.SETTINGS_READ, perm.CITIES_READ))

    depths = {(d, i.id) for d, i in flatten(view.groups)}
    assert (0, "settings") in depths
    assert (1, "settings-cities") in depths
    assert (2, "settings-cities-list") in depths
    assert len(view.paths) == len(set(view.paths))
    assert view.paths == accessible_paths(view.groups)


def test_catalogue_is_not_mutated():
    before = SIDEBAR_MENU

    build_navigation(_principal("*", user_type="ADMIN"), "/parcels")

    assert SIDEBAR_MENU is before
    parcels = next(g for g in SIDEBAR_MENU if g.id == "parcels").items[0]
    assert not parcels.active
    assert len(parcels.children) == 2

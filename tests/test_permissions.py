from __future__ import annotations

import pytest

from core.domain import permissions as perm
from core.domain.identity import User
from core.domain.permissions import ANONYMOUS, Principal


def test_anonymous_has_nothing():
    assert ANONYMOUS.is_anonymous
    assert not ANONYMOUS.has_permission(perm.PARCELS_READ)
    assert ANONYMOUS.has_any_permission([])


@pytest.mark.parametrize("wildcard", ["*", "super_admin"])
def test_wildcards_grant_everything(wildcard):
    principal = Principal(user_id="u1", permissions=frozenset({wildcard}))

    assert principal.has_permission(perm.ROLES_DELETE)
    assert principal.has_all_permissions([perm.USERS_READ, perm.PAYMENTS_SEND])


def test_any_and_all_permission_checks():
    principal = Principal(user_id="u1", permissions=frozenset({perm.PARCELS_READ}))

    assert principal.has_any_permission([perm.USERS_READ, perm.PARCELS_READ])
    assert not principal.has_any_permission([perm.USERS_READ])
    assert not principal.has_all_permissions([perm.PARCELS_READ, perm.PARCELS_CREATE])


def test_roles_compare_case_insensitively():
    principal = Principal(user_id="u1", role_name="Manager")

    assert principal.has_role("manager")
    assert principal.has_any_role(["admin", "MANAGER"])
    assert principal.has_any_role([])
    assert not Principal(user_id="u1").has_role("manager")


def test_user_type_requirement():
    principal = Principal(user_id="u1", user_type="SELLER")

    assert principal.has_user_type([])
    assert principal.has_user_type(["ADMIN", "SELLER"])
    assert not principal.has_user_type(["ADMIN"])
    assert not Principal(user_id="u1").has_user_type(["ADMIN"])


def test_from_claims_falls_back_to_role_permissions():
    principal = Principal.from_claims(
        {
            "sub": "u9",
            "email": "a@b.c",
            "userType": "MANAGER",
            "tenantId": "t1",
            "role": {"name": "Ops", "permissions": ["zones:read"]},
        }
    )

    assert principal.user_id == "u9"
    assert principal.role_name == "Ops"
    assert principal.tenant_id == "t1"
    assert principal.permissions == frozenset({"zones:read"})


def test_from_claims_with_string_role_and_user_id():
    principal = Principal.from_claims({"userId": "u2", "role": "admin", "permissions": ["*"]})

    assert principal.user_id == "u2"
    assert principal.has_role("ADMIN")
    assert principal.has_permission("anything:goes")


def test_from_user_prefers_explicit_permissions():
    user = User.model_validate(
        {
            "id": "u1",
            "email": "ops@example.com",
            "userType": "ADMIN",
            "tenant": {"id": "t-nested", "name": "Acme"},
            "role": {"name": "Admin", "permissions": ["users:read"]},
        }
    )

    from_role = Principal.from_user(user)
    explicit = Principal.from_user(user, ["parcels:read"])

    assert from_role.permissions == frozenset({"users:read"})
    assert from_role.tenant_id == "t-nested"
    assert explicit.permissions == frozenset({"parcels:read"})


def test_permission_groups_are_known_keys():
    assert perm.PARCELS_READ in perm.PERMISSION_GROUPS["PARCELS"]
    assert all(":" in key for keys in perm.PERMISSION_GROUPS.values() for key in keys)

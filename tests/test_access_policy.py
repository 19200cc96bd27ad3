from itertools import chain, combinations

import pytest

from medtrack.core.errors import InvalidRole, Unauthorized
from medtrack.models.enums import Role
from medtrack.services import access_policy
from medtrack.services.access_policy import NavigationItem


def _role_sets():
    roles = list(Role)
    return [frozenset(c) for c in chain.from_iterable(combinations(roles, n) for n in range(len(roles) + 1))]


@pytest.mark.parametrize("role", list(Role))
@pytest.mark.parametrize("required", _role_sets())
def test_can_access_matches_intersection_rule(role, required):
    assert access_policy.can_access({role}, required) == (not required or role in required)


def test_supplier_denied_admin_route_but_allowed_public_route():
    assert access_policy.can_access({Role.SUPPLIER}, {Role.ADMIN}) is False
    assert access_policy.can_access({Role.SUPPLIER}, set()) is True


def test_user_without_roles_only_sees_public_resources():
    assert access_policy.can_access(set(), set()) is True
    assert access_policy.can_access(set(), {Role.ADMIN, Role.PHARMACIST}) is False


def test_multiple_roles_are_supported():
    roles = {Role.SUPPLIER, Role.PHARMACIST}
    assert access_policy.can_access(roles, {Role.PHARMACIST})
    assert access_policy.has_role(roles, Role.SUPPLIER)
    assert not access_policy.has_role(roles, Role.ADMIN)


def test_string_values_are_accepted_exactly():
    assert access_policy.has_role({"admin"}, "admin")
    assert access_policy.can_access(["pharmacist"], ["admin", "pharmacist"])


@pytest.mark.parametrize("bad", ["Admin", "ADMIN", " admin", "manager", "", None, 1])
def test_unknown_role_values_raise_invalid_role(bad):
    with pytest.raises(InvalidRole):
        access_policy.has_role({Role.ADMIN}, bad)
    with pytest.raises(InvalidRole):
        access_policy.can_access({bad}, {Role.ADMIN})
    with pytest.raises(InvalidRole):
        access_policy.can_access({Role.ADMIN}, {bad})


def test_visible_navigation_per_role():
    def paths(*roles):
        return [item.path for item in access_policy.visible_navigation(set(roles))]

    assert paths(Role.ADMIN) == ["/", "/inventory", "/orders", "/alerts", "/users"]
    assert paths(Role.PHARMACIST) == ["/", "/inventory", "/orders", "/alerts"]
    assert paths(Role.SUPPLIER) == ["/", "/inventory", "/orders"]
    assert paths() == []


def test_visible_navigation_is_order_preserving_subsequence():
    items = [
        NavigationItem("/z", "Zeta", frozenset({Role.SUPPLIER})),
        NavigationItem("/a", "Alpha", frozenset()),
        NavigationItem("/m", "Mid", frozenset({Role.ADMIN})),
        NavigationItem("/b", "Beta", frozenset({Role.SUPPLIER, Role.ADMIN})),
    ]
    for roles in _role_sets():
        visible = access_policy.visible_navigation(roles, items)
        positions = [items.index(item) for item in visible]
        assert positions == sorted(positions)
        assert all(access_policy.can_access(roles, item.required_roles) for item in visible)

    assert [i.path for i in access_policy.visible_navigation({Role.SUPPLIER}, items)] == ["/z", "/a", "/b"]


def test_ensure_access_raises_unauthorized():
    access_policy.ensure_access({Role.ADMIN}, access_policy.USER_MANAGERS, "manage users")
    with pytest.raises(Unauthorized, match="manage users"):
        access_policy.ensure_access({Role.PHARMACIST}, access_policy.USER_MANAGERS, "manage users")


def test_primary_role_is_first_assigned():
    assert access_policy.primary_role([Role.SUPPLIER, Role.ADMIN]) == Role.SUPPLIER
    assert access_policy.primary_role([]) is None

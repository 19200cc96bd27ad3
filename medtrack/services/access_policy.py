"""Role checks and navigation filtering.

Every function here is pure: the caller passes the role set it resolved for
the current user. Roles may be given as ``Role`` members or as their exact
string values; anything else raises ``InvalidRole``.
"""
from dataclasses import dataclass
from typing import Iterable, Sequence

from medtrack.core.errors import InvalidRole, Unauthorized
from medtrack.models.enums import Role


ROLE_LABELS: dict[Role, str] = {
    Role.ADMIN: "Admin",
    Role.SUPPLIER: "Supplier",
    Role.PHARMACIST: "Pharmacist",
}

ALL_ROLES = frozenset(Role)
INVENTORY_EDITORS = frozenset({Role.ADMIN, Role.SUPPLIER})
ORDER_CREATORS = frozenset({Role.SUPPLIER, Role.PHARMACIST})
ORDER_APPROVERS = frozenset({Role.ADMIN})
ALERT_VIEWERS = frozenset({Role.ADMIN, Role.PHARMACIST})
USER_MANAGERS = frozenset({Role.ADMIN})


@dataclass(frozen=True)
class NavigationItem:
    path: str
    label: str
    required_roles: frozenset[Role]


NAVIGATION: tuple[NavigationItem, ...] = (
    NavigationItem("/", "Dashboard", ALL_ROLES),
    NavigationItem("/inventory", "Inventory", ALL_ROLES),
    NavigationItem("/orders", "Orders", ALL_ROLES),
    NavigationItem("/alerts", "Alerts", ALERT_VIEWERS),
    NavigationItem("/users", "Users", USER_MANAGERS),
)


def parse_role(value) -> Role:
    if isinstance(value, Role):
        return value
    if isinstance(value, str):
        try:
            return Role(value)
        except ValueError:
            pass
    raise InvalidRole(f"Unknown role: {value!r}")


def parse_roles(values: Iterable) -> frozenset[Role]:
    return frozenset(parse_role(v) for v in values)


def can_access(user_roles: Iterable, required_roles: Iterable) -> bool:
    required = parse_roles(required_roles)
    roles = parse_roles(user_roles)
    if not required:
        return True
    return not roles.isdisjoint(required)


def has_role(user_roles: Iterable, role) -> bool:
    return parse_role(role) in parse_roles(user_roles)


def visible_navigation(user_roles: Iterable, items: Sequence[NavigationItem] = NAVIGATION) -> list[NavigationItem]:
    roles = parse_roles(user_roles)
    return [item for item in items if can_access(roles, item.required_roles)]


def ensure_access(user_roles: Iterable, required_roles: Iterable, action: str) -> None:
    if not can_access(user_roles, required_roles):
        raise Unauthorized(f"Insufficient permissions to {action}")


def primary_role(user_roles: Sequence) -> Role | None:
    # The first assigned role is the one shown next to the user's name.
    return parse_role(user_roles[0]) if user_roles else None

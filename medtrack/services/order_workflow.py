from typing import Iterable

from medtrack.core.errors import InvalidTransition
from medtrack.models.enums import OrderStatus
from medtrack.services import access_policy


ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.APPROVED, OrderStatus.CANCELLED}),
    OrderStatus.APPROVED: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

INITIAL_STATUS = OrderStatus.PENDING

_ORDERING = list(OrderStatus)


def is_terminal(status: OrderStatus) -> bool:
    return not ALLOWED_TRANSITIONS[status]


def next_statuses(current: OrderStatus) -> list[OrderStatus]:
    return sorted(ALLOWED_TRANSITIONS[current], key=_ORDERING.index)


def validate_transition(current: OrderStatus, target: OrderStatus, user_roles: Iterable) -> OrderStatus:
    """Return ``target`` if the caller may move an order from ``current`` to it.

    Raises ``Unauthorized`` for callers without the admin role (checked before
    the table) and ``InvalidTransition`` for moves the state machine does not
    list. Nothing is mutated here; the caller applies the returned status.
    """
    access_policy.ensure_access(user_roles, access_policy.ORDER_APPROVERS, "change order status")
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransition(f"Cannot move order from {current.value} to {target.value}")
    return target
